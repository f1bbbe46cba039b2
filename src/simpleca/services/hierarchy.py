"""Load or regenerate the CA hierarchy and issue server certificates.

Files are written one at a time in issuance order (root key, root
certificate, intermediate key, intermediate certificate).  There is no
rollback: if the intermediate fails after a fresh root was written, the
root files stay on disk and the next run reuses them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from simpleca.ca.builder import create_intermediate_ca, create_root_ca, create_server_cert
from simpleca.ca.keys import certificate_to_pem, private_key_to_pem
from simpleca.ca.params import intermediate_ca_params, root_ca_params, server_cert_params
from simpleca.ca.store import CAStore, get_certificate, get_private_key, write_file
from simpleca.core.name import common_name_of

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cryptography import x509
    from cryptography.hazmat.primitives.asymmetric.types import (
        CertificateIssuerPrivateKeyTypes,
    )

    from simpleca.config.settings import SimpleCASettings
    from simpleca.core.name import Name

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuerContext:
    """A CA certificate with its private key, ready to sign the next tier."""

    cert: x509.Certificate
    key: CertificateIssuerPrivateKeyTypes


@dataclass(frozen=True)
class IssuedServerCert:
    """Result of :func:`generate_server_cert`."""

    cert: x509.Certificate
    key: CertificateIssuerPrivateKeyTypes
    cert_path: Path
    key_path: Path


def _report(verbose: bool, what: str, path: Path) -> None:
    log.log(logging.INFO if verbose else logging.DEBUG, "Saved %s at: %s", what, path)


def load_ca(
    store: CAStore,
    settings: SimpleCASettings,
    *,
    reset: bool = False,
    verbose: bool = False,
) -> IssuerContext:
    """Return the intermediate CA, creating missing tiers first.

    Parameters
    ----------
    store:
        PEM layout of the configuration directory.
    settings:
        Loaded configuration (CA identity, lifetimes, key sizes).
    reset:
        Regenerate root and intermediate even if their files exist.
    verbose:
        Report every written file at INFO level instead of DEBUG.

    Raises
    ------
    CAError
        On any key, encoding or storage failure.

    """
    ca_create = reset or not store.ca_key.exists() or not store.ca_cert.exists()
    intermediate_create = (
        ca_create or not store.intermediate_key.exists() or not store.intermediate_cert.exists()
    )

    # -- root --
    ca_key = get_private_key(ca_create, store.ca_key, settings.keys.ca_key_size)
    if ca_create:
        log.debug("Regenerating root CA (reset=%s)", reset)
        _report(
            verbose,
            "CA private key",
            write_file(private_key_to_pem(ca_key), store.ca_key, private=True),
        )

    ca_name = settings.ca.ca_name().to_distinguished_name()
    ca_params = root_ca_params(ca_name, ca_key, settings.validity.root_days)
    ca_cert = get_certificate(ca_create, store.ca_cert, lambda: create_root_ca(ca_params))
    if ca_create:
        _report(verbose, "CA certificate", store.ca_cert)

    # -- intermediate --
    intermediate_key = get_private_key(
        intermediate_create,
        store.intermediate_key,
        settings.keys.ca_key_size,
    )
    if intermediate_create:
        _report(
            verbose,
            "intermediate private key",
            write_file(private_key_to_pem(intermediate_key), store.intermediate_key, private=True),
        )

    # The stored root's subject is authoritative over the configured name.
    intermediate_params = intermediate_ca_params(
        settings.ca.intermediate_name().to_distinguished_name(),
        intermediate_key,
        ca_cert.subject,
        ca_key,
        settings.validity.intermediate_days,
    )
    intermediate_cert = get_certificate(
        intermediate_create,
        store.intermediate_cert,
        lambda: create_intermediate_ca(intermediate_params, ca_cert),
    )
    if intermediate_create:
        _report(verbose, "intermediate certificate", store.intermediate_cert)

    return IssuerContext(cert=intermediate_cert, key=intermediate_key)


def generate_server_cert(
    store: CAStore,
    settings: SimpleCASettings,
    name: Name,
    alt_names: Sequence[str] = (),
    *,
    verbose: bool = False,
) -> IssuedServerCert:
    """Issue a server certificate for *name* under the stored intermediate.

    The key and certificate are written to the reversed-domain file names
    of ``name.common_name``.  Missing CA tiers are created first; existing
    ones are never reset.
    """
    subject = name.to_distinguished_name()
    domain = common_name_of(subject)

    key = get_private_key(True, store.server_key(domain), settings.keys.server_key_size)
    key_path = write_file(private_key_to_pem(key), store.server_key(domain), private=True)
    _report(verbose, "server key", key_path)

    issuer = load_ca(store, settings, reset=False, verbose=verbose)

    params = server_cert_params(
        subject,
        key,
        issuer.cert.subject,
        issuer.key,
        settings.validity.server_days,
        alt_names,
    )
    cert = create_server_cert(params, issuer.cert)
    cert_path = write_file(certificate_to_pem(cert), store.server_cert(domain))
    _report(verbose, "server certificate", cert_path)

    log.debug(
        "Issued server certificate: cn=%s, sans=%s, serial=%x",
        domain,
        list(params.sub_alt_names),
        params.serial,
    )
    return IssuedServerCert(cert=cert, key=key, cert_path=cert_path, key_path=key_path)
