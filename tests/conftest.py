"""Root conftest for the SimpleCA test suite."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest
import yaml
from cryptography.hazmat.primitives.asymmetric import rsa

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Key material — 2048-bit keys keep the suite fast
# ---------------------------------------------------------------------------


def _rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def root_key() -> rsa.RSAPrivateKey:
    return _rsa_key()


@pytest.fixture(scope="session")
def intermediate_key() -> rsa.RSAPrivateKey:
    return _rsa_key()


@pytest.fixture(scope="session")
def server_key() -> rsa.RSAPrivateKey:
    return _rsa_key()


@pytest.fixture()
def base_name():
    """A CA identity with some attributes left empty."""
    from simpleca.core.name import Name

    return Name(
        country="AU",
        province="TAS",
        locality="Hobart",
        org="",
        org_unit="",
        common_name="ROOT CA",
    )


# ---------------------------------------------------------------------------
# Config data shared by multiple test modules
# ---------------------------------------------------------------------------


@pytest.fixture()
def minimal_config_data() -> dict:
    """Return a config dict with small keys for fast issuance."""
    return {
        "ca": {"organization": "Test Org", "country": "AU"},
        "keys": {"ca_key_size": 2048, "server_key_size": 2048},
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, minimal_config_data: dict) -> Path:
    """Write *minimal_config_data* to a temp YAML file and return its path."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        yaml.safe_dump(minimal_config_data, default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    return cfg


# ---------------------------------------------------------------------------
# ConfigKit singleton cleanup — autouse so every test gets a fresh slate
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_config():
    """Reset the SimpleCAConfig singleton before and after every test."""
    try:
        from simpleca.config.simpleca_config import SimpleCAConfig

        SimpleCAConfig.reset()
    except Exception:
        pass
    yield
    try:
        from simpleca.config.simpleca_config import SimpleCAConfig

        SimpleCAConfig.reset()
    except Exception:
        pass


@pytest.fixture(autouse=True)
def reset_simpleca_logger():
    """Undo ``configure_logging`` so caplog sees records in later tests."""
    yield
    logger = logging.getLogger("simpleca")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
