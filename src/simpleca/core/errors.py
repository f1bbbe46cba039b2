"""Error taxonomy for certificate issuance.

Every failure raised by the CA core, the key-material provider and the
certificate store derives from :class:`CAError`.  Nothing in the core
retries; errors propagate to the command that started the issuance.
"""

from __future__ import annotations


class CAError(Exception):
    """Base class for issuance failures.

    Parameters
    ----------
    detail:
        Human-readable description of the failure.

    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class ParameterError(CAError):
    """Certificate parameters are unusable (e.g. subject without a CN)."""


class EncodingError(CAError):
    """ASN.1 / DN / extension construction or signing failed."""


class KeyMaterialError(CAError):
    """A private key could not be generated or decoded."""


class StorageError(CAError):
    """A key or certificate file could not be read or written."""
