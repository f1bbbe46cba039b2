"""Certificate assembly and signing.

The root CA signs itself and needs its own key identifier as the basis of
its authority key identifier, so it is issued in two steps::

    draft = draft_root_ca(params)          # SKI only, discarded afterwards
    root = finalize_root_ca(params, draft)

Intermediate and server certificates are issued in a single step against
the certificate of their issuer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from simpleca.ca.extensions import assemble_extensions
from simpleca.core.errors import CAError, EncodingError
from simpleca.core.types import CertTier

if TYPE_CHECKING:
    from collections.abc import Sequence

    from simpleca.ca.extensions import ExtensionEntry
    from simpleca.ca.params import CertParams

log = logging.getLogger(__name__)


def build_and_sign(
    params: CertParams,
    extensions: Sequence[ExtensionEntry],
) -> x509.Certificate:
    """Build an X.509v3 certificate from *params* and sign it.

    The certificate is signed by ``params.issuer.key`` with SHA-256.

    Raises
    ------
    EncodingError
        If ``cryptography`` rejects any field, extension or the signing
        operation.  The underlying error is chained.

    """
    not_before, not_after = params.validity_window()
    subject = params.subject
    issuer = params.issuer

    try:
        builder = (
            x509.CertificateBuilder()
            .serial_number(params.serial)
            .not_valid_before(not_before)
            .not_valid_after(not_after)
            .subject_name(subject.name)
            .public_key(subject.key.public_key())  # type: ignore[arg-type]
            .issuer_name(issuer.name)
        )
        for entry in extensions:
            builder = builder.add_extension(entry.value, critical=entry.critical)

        cert = builder.sign(issuer.key, hashes.SHA256())
    except CAError:
        raise
    except Exception as exc:  # noqa: BLE001
        msg = f"Failed to build/sign certificate: {exc}"
        raise EncodingError(msg) from exc

    return cert


def _issue(
    tier: CertTier,
    params: CertParams,
    context: x509.Certificate,
) -> x509.Certificate:
    cert = build_and_sign(params, assemble_extensions(tier, params, context))
    log.debug(
        "Issued %s certificate: serial=%x, subject=%s, issuer=%s, validity=%d days",
        tier,
        params.serial,
        params.subject.name.rfc4514_string(),
        params.issuer.name.rfc4514_string(),
        params.valid_days,
        extra={"tier": str(tier), "serial": params.serial, "valid_days": params.valid_days},
    )
    return cert


def draft_root_ca(params: CertParams) -> x509.Certificate:
    """Phase one of root issuance: a self-signed certificate with SKI only.

    The draft only supplies key-identifier material to
    :func:`finalize_root_ca` and must never be stored.
    """
    return build_and_sign(params, assemble_extensions(CertTier.ROOT, params, None))


def finalize_root_ca(params: CertParams, draft: x509.Certificate) -> x509.Certificate:
    """Phase two of root issuance, using *draft* as the signing context."""
    return _issue(CertTier.ROOT, params, draft)


def create_root_ca(params: CertParams) -> x509.Certificate:
    """Issue the self-signed root CA certificate."""
    return finalize_root_ca(params, draft_root_ca(params))


def create_intermediate_ca(
    params: CertParams,
    root_cert: x509.Certificate,
) -> x509.Certificate:
    """Issue the intermediate CA certificate under *root_cert*."""
    return _issue(CertTier.INTERMEDIATE, params, root_cert)


def create_server_cert(
    params: CertParams,
    intermediate_cert: x509.Certificate,
) -> x509.Certificate:
    """Issue a server certificate under *intermediate_cert*."""
    return _issue(CertTier.SERVER, params, intermediate_cert)
