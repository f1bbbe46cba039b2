"""Typed, frozen dataclasses for every configuration section.

This module is the **single source of truth** for default values.
JSON Schema defaults exist only for documentation — these builders
are what the application actually reads.

Access pattern::

    config = SimpleCAConfig(config_file=path, schema_file="bundled")
    config.settings.validity.root_days
"""

from __future__ import annotations

from dataclasses import dataclass

from simpleca.core.name import Name

DEFAULT_ORGANIZATION = "Simple CA"

# ---------------------------------------------------------------------------
# CA identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CASettings:
    """Organisational identity shared by the root and intermediate CAs."""

    country: str | None
    state_or_province: str | None
    locality: str | None
    organization: str | None
    organization_unit: str | None

    def ca_name(self) -> Name:
        """Root CA identity, common name ``"{org} Root CA"``."""
        org = self.organization or DEFAULT_ORGANIZATION
        return Name(
            country=self.country or "",
            province=self.state_or_province or "",
            locality=self.locality or "",
            org=self.organization or "",
            org_unit=self.organization_unit or "",
            common_name=f"{org} Root CA",
        )

    def intermediate_name(self) -> Name:
        """Intermediate CA identity, common name ``"{org} Intermediate CA"``."""
        org = self.organization or DEFAULT_ORGANIZATION
        return self.ca_name().with_common_name(f"{org} Intermediate CA")


def _build_ca(data: dict | None) -> CASettings:
    d = data or {}
    return CASettings(
        country=d.get("country"),
        state_or_province=d.get("state_or_province"),
        locality=d.get("locality"),
        organization=d.get("organization", DEFAULT_ORGANIZATION),
        organization_unit=d.get("organization_unit"),
    )


# ---------------------------------------------------------------------------
# Validity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValiditySettings:
    """Certificate lifetimes in days per tier."""

    root_days: int
    intermediate_days: int
    server_days: int


def _build_validity(data: dict | None) -> ValiditySettings:
    d = data or {}
    return ValiditySettings(
        root_days=d.get("root_days", 7200),
        intermediate_days=d.get("intermediate_days", 3600),
        server_days=d.get("server_days", 370),
    )


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeySettings:
    """RSA key sizes in bits."""

    ca_key_size: int
    server_key_size: int


def _build_keys(data: dict | None) -> KeySettings:
    d = data or {}
    return KeySettings(
        ca_key_size=d.get("ca_key_size", 4096),
        server_key_size=d.get("server_key_size", 2048),
    )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingSettings:
    """Application logging configuration (level, format)."""

    level: str
    format: str


def _build_logging(data: dict | None) -> LoggingSettings:
    d = data or {}
    return LoggingSettings(
        level=d.get("level", "WARNING"),
        format=d.get("format", "text"),
    )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimpleCASettings:
    """Top-level settings tree."""

    ca: CASettings
    validity: ValiditySettings
    keys: KeySettings
    logging: LoggingSettings


def build_settings(data: dict) -> SimpleCASettings:
    """Build the full typed settings tree from raw config data.

    Called once during :class:`SimpleCAConfig` initialisation after
    schema validation and environment-variable resolution.
    """
    return SimpleCASettings(
        ca=_build_ca(data.get("ca")),
        validity=_build_validity(data.get("validity")),
        keys=_build_keys(data.get("keys")),
        logging=_build_logging(data.get("logging")),
    )


DEFAULT_CONFIG: dict = {
    "ca": {"organization": DEFAULT_ORGANIZATION},
    "validity": {"root_days": 7200, "intermediate_days": 3600, "server_days": 370},
    "keys": {"ca_key_size": 4096, "server_key_size": 2048},
    "logging": {"level": "WARNING", "format": "text"},
}
