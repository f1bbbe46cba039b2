"""SimpleCA configuration loader built on ConfigKit.

Lifecycle::

    # 1. CLI resolves the configuration directory once
    config_dir = resolve_config_dir(args.config_dir)
    config_file = ensure_config_file(config_dir)

    # 2. ...and loads the typed settings from it
    config = SimpleCAConfig(config_file=config_file, schema_file="bundled")
    config.settings.validity.server_days

The resolved directory and settings are then passed explicitly to the
store and the hierarchy service.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from configkit import ConfigKit, ConfigKitMeta

from simpleca.config.settings import DEFAULT_CONFIG, SimpleCASettings, build_settings

_SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

_COUNTRY_RE = re.compile(r"^[A-Za-z]{2}$")

_MIN_RSA_KEY_SIZE = 2048

CONFIG_DIR_NAME = ".simpleca"
CONFIG_FILE_NAME = "config.yaml"
CONFIG_DIR_ENV = "SIMPLECA_HOME"

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ConfigValidationError(Exception):
    """Raised when cross-field validation finds one or more problems."""

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


class ConfigDirectoryError(Exception):
    """The configuration directory cannot be resolved or created."""


# ---------------------------------------------------------------------------
# Configuration directory
# ---------------------------------------------------------------------------


def resolve_config_dir(override: str | Path | None = None) -> Path:
    """Resolve and create the SimpleCA configuration directory.

    Precedence: *override*, then ``$SIMPLECA_HOME``, then
    ``~/.simpleca``.

    Raises
    ------
    ConfigDirectoryError
        If the home directory cannot be determined, or the target
        exists but is not a directory, or it cannot be created.

    """
    if override:
        config_dir = Path(override).expanduser()
    elif os.environ.get(CONFIG_DIR_ENV):
        config_dir = Path(os.environ[CONFIG_DIR_ENV]).expanduser()
    else:
        try:
            config_dir = Path.home() / CONFIG_DIR_NAME
        except RuntimeError as exc:
            msg = "Unable to locate home directory."
            raise ConfigDirectoryError(msg) from exc

    if config_dir.exists():
        if not config_dir.is_dir():
            msg = f"Cannot create config directory {config_dir}: a file is in the way"
            raise ConfigDirectoryError(msg)
    else:
        try:
            config_dir.mkdir(parents=True)
        except OSError as exc:
            msg = f"Cannot create config directory {config_dir}: {exc}"
            raise ConfigDirectoryError(msg) from exc
    return config_dir


def ensure_config_file(config_dir: Path) -> Path:
    """Return the config file in *config_dir*, writing defaults if absent."""
    config_file = config_dir / CONFIG_FILE_NAME
    if not config_file.exists():
        config_file.write_text(
            yaml.safe_dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        log.info("Wrote default configuration to %s", config_file)
    return config_file


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def _resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                _resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                _resolve_env_vars(item, child_path)


# ---------------------------------------------------------------------------
# Config class
# ---------------------------------------------------------------------------


class SimpleCAConfig(ConfigKit):
    """Configuration for SimpleCA.

    Subclasses :class:`configkit.ConfigKit`.  The JSON schema is
    bundled at ``config/schema.json``; users supply only ``config_file``.

    After construction the typed settings tree is available at
    :pyattr:`settings` and the raw dict via :pyattr:`data`.
    """

    def __init__(
        self,
        *,
        config_file: str | Path,
        schema_file: str | Path | None = None,  # noqa: ARG002
    ) -> None:
        """Load and validate *config_file*.

        Parameters
        ----------
        config_file:
            Path to the YAML/JSON configuration file.
        schema_file:
            Ignored.  Exists only to satisfy the
            :class:`ConfigKitMeta` singleton guard.

        """
        super().__init__(
            config_file=config_file,
            schema_file=_SCHEMA_PATH,
        )
        self._settings: SimpleCASettings = build_settings(self.data)

    def _load(self) -> None:
        """Load config file then resolve ``${VAR}`` env-var references.

        Runs before schema validation so substituted values are checked
        against the schema.
        """
        super()._load()
        _resolve_env_vars(self._data)

    @property
    def settings(self) -> SimpleCASettings:
        """Fully-typed, frozen settings tree."""
        return self._settings

    def additional_checks(self) -> None:
        """Semantic & cross-field validation.

        Called automatically by ConfigKit **after** schema validation
        passes.
        """
        errors: list[str] = []
        warnings: list[str] = []

        ca = self.data.get("ca") or {}
        validity = self.data.get("validity") or {}
        keys = self.data.get("keys") or {}

        # -- CA identity --
        country = ca.get("country")
        if country and not _COUNTRY_RE.match(country):
            errors.append(
                f"ca.country must be a two-letter country code (got '{country}')",
            )

        # -- validity --
        for field in ("root_days", "intermediate_days", "server_days"):
            days = validity.get(field)
            if days is not None and days <= 0:
                errors.append(f"validity.{field} must be positive (got {days})")

        intermediate_days = validity.get("intermediate_days", 3600)
        server_days = validity.get("server_days", 370)
        if server_days > intermediate_days:
            warnings.append(
                f"validity.server_days ({server_days}) exceeds "
                f"validity.intermediate_days ({intermediate_days}) — server "
                "certificates will outlive their issuer",
            )

        # -- keys --
        for field in ("ca_key_size", "server_key_size"):
            size = keys.get(field)
            if size is not None and size < _MIN_RSA_KEY_SIZE:
                errors.append(
                    f"keys.{field} must be at least {_MIN_RSA_KEY_SIZE} (got {size})",
                )

        for w in warnings:
            log.warning("Config warning: %s", w)

        if errors:
            raise ConfigValidationError(errors)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton -- testing only."""
        ConfigKitMeta.reset()

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        source = self.data.get("_source", "?")
        return f"<SimpleCAConfig config_file={source}>"
