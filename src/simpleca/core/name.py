"""Flat identity fields and their distinguished-name encoding."""

from __future__ import annotations

from dataclasses import dataclass, replace

from cryptography import x509
from cryptography.x509.oid import NameOID

from simpleca.core.errors import EncodingError, ParameterError

# Fixed DN attribute order; key identifiers and issuer matching depend on
# the canonical encoding.
_DN_FIELDS = (
    ("country", NameOID.COUNTRY_NAME),
    ("province", NameOID.STATE_OR_PROVINCE_NAME),
    ("locality", NameOID.LOCALITY_NAME),
    ("org", NameOID.ORGANIZATION_NAME),
    ("org_unit", NameOID.ORGANIZATIONAL_UNIT_NAME),
    ("common_name", NameOID.COMMON_NAME),
)


@dataclass(frozen=True)
class Name:
    """Subject identity for one certificate tier.

    Empty attributes are left out of the distinguished name.
    """

    country: str = ""
    province: str = ""
    locality: str = ""
    org: str = ""
    org_unit: str = ""
    common_name: str = ""

    def with_common_name(self, common_name: str) -> Name:
        """Return a copy of this name carrying *common_name*."""
        return replace(self, common_name=common_name)

    def to_distinguished_name(self) -> x509.Name:
        return to_distinguished_name(self)


def to_distinguished_name(name: Name) -> x509.Name:
    """Encode *name* as an ordered :class:`x509.Name`.

    Raises
    ------
    EncodingError
        If ``cryptography`` rejects an attribute value (for example a
        country code that is not two characters long).

    """
    attributes = []
    for field, oid in _DN_FIELDS:
        value = getattr(name, field)
        if not value:
            continue
        try:
            attributes.append(x509.NameAttribute(oid, value))
        except ValueError as exc:
            msg = f"Invalid {field} value {value!r}: {exc}"
            raise EncodingError(msg) from exc
    return x509.Name(attributes)


def common_name_of(dn: x509.Name) -> str:
    """Return the first common name in *dn*.

    Raises
    ------
    ParameterError
        If *dn* carries no common name.

    """
    attrs = dn.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attrs:
        msg = f"Distinguished name '{dn.rfc4514_string()}' has no common name"
        raise ParameterError(msg)
    value = attrs[0].value
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    return value
