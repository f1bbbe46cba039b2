"""Per-tier certificate parameter bundles.

A :class:`CertParams` is built once per certificate to be issued and
handed straight to the builder; it is never persisted.

Serial policy
-------------
Root and intermediate certificates use the fixed serials
:data:`ROOT_CA_SERIAL` and :data:`INTERMEDIATE_CA_SERIAL`.  This is only
acceptable because the whole hierarchy is regenerated together in a
development setup; a production CA must allocate collision-resistant
serials per issuance.  Server certificates derive their serial from the
wall clock in nanoseconds.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from simpleca.core.errors import ParameterError
from simpleca.core.name import common_name_of

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cryptography import x509
    from cryptography.hazmat.primitives.asymmetric.types import (
        CertificateIssuerPrivateKeyTypes,
    )

ROOT_CA_SERIAL = 1000
INTERMEDIATE_CA_SERIAL = 10000


def create_serial_number() -> int:
    """Return a serial derived from the current time in nanoseconds."""
    return time.time_ns()


@dataclass(frozen=True)
class Entity:
    """A distinguished name paired with the private key that owns it."""

    name: x509.Name
    key: CertificateIssuerPrivateKeyTypes


@dataclass(frozen=True)
class CertParams:
    """Everything the builder needs to issue one certificate.

    Attributes
    ----------
    subject:
        Identity and key of the certificate holder.
    explicit_issuer:
        Identity and key of the signer, or ``None`` for a self-issued
        certificate.
    valid_days:
        Length of the validity window in days.
    serial:
        Certificate serial number.
    sub_alt_names:
        DNS names for the subjectAltName extension, in order.

    """

    subject: Entity
    explicit_issuer: Entity | None
    valid_days: int
    serial: int
    sub_alt_names: tuple[str, ...] = field(default=())

    @property
    def issuer(self) -> Entity:
        """The signing entity; the subject itself when self-issued."""
        return self.explicit_issuer or self.subject

    @property
    def self_issued(self) -> bool:
        return self.explicit_issuer is None

    def validity_window(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """Return ``(not_before, not_after)`` anchored on a single instant.

        Sub-second precision is dropped since X.509 times carry whole
        seconds, which keeps ``not_after - not_before`` exactly
        ``valid_days`` after encoding.
        """
        if now is None:
            now = datetime.now(UTC)
        not_before = now.replace(microsecond=0)
        return not_before, not_before + timedelta(days=self.valid_days)


def _check_validity(valid_days: int) -> None:
    if valid_days <= 0:
        msg = f"Validity must be a positive number of days (got {valid_days})"
        raise ParameterError(msg)


def root_ca_params(
    name: x509.Name,
    key: CertificateIssuerPrivateKeyTypes,
    valid_days: int,
) -> CertParams:
    """Parameters for the self-signed root CA."""
    _check_validity(valid_days)
    return CertParams(
        subject=Entity(name=name, key=key),
        explicit_issuer=None,
        valid_days=valid_days,
        serial=ROOT_CA_SERIAL,
    )


def intermediate_ca_params(  # noqa: PLR0913
    name: x509.Name,
    key: CertificateIssuerPrivateKeyTypes,
    root_name: x509.Name,
    root_key: CertificateIssuerPrivateKeyTypes,
    valid_days: int,
) -> CertParams:
    """Parameters for the intermediate CA signed by the root."""
    _check_validity(valid_days)
    return CertParams(
        subject=Entity(name=name, key=key),
        explicit_issuer=Entity(name=root_name, key=root_key),
        valid_days=valid_days,
        serial=INTERMEDIATE_CA_SERIAL,
    )


def server_cert_params(  # noqa: PLR0913
    name: x509.Name,
    key: CertificateIssuerPrivateKeyTypes,
    issuer_name: x509.Name,
    issuer_key: CertificateIssuerPrivateKeyTypes,
    valid_days: int,
    sub_alt_names: Iterable[str] = (),
) -> CertParams:
    """Parameters for a server certificate signed by the intermediate.

    The subject common name is always the first SAN entry, followed by
    *sub_alt_names* in the order given.

    Raises
    ------
    ParameterError
        If *name* has no common name or *valid_days* is not positive.

    """
    _check_validity(valid_days)
    common_name = common_name_of(name)
    return CertParams(
        subject=Entity(name=name, key=key),
        explicit_issuer=Entity(name=issuer_name, key=issuer_key),
        valid_days=valid_days,
        serial=create_serial_number(),
        sub_alt_names=(common_name, *sub_alt_names),
    )
