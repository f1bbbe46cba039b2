"""Identity and tier primitives shared by the CA core."""

from simpleca.core.name import Name, common_name_of, to_distinguished_name
from simpleca.core.types import CertTier

__all__ = [
    "CertTier",
    "Name",
    "common_name_of",
    "to_distinguished_name",
]
