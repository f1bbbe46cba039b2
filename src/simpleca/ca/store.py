"""PEM file layout of a SimpleCA configuration directory.

::

    <config_dir>/
        ca.key.pem                 root private key
        ca.cert.pem                root certificate
        intermediate.key.pem       intermediate private key
        intermediate.cert.pem      intermediate certificate
        com.example.www.key.pem    server key for www.example.com
        com.example.www.cert.pem   server certificate for www.example.com

The store never decides *whether* to regenerate; callers pass
``generate`` explicitly and do their own logging.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from simpleca.ca.keys import (
    certificate_to_pem,
    generate_private_key,
    load_certificate,
    load_private_key,
)
from simpleca.core.errors import StorageError

if TYPE_CHECKING:
    from collections.abc import Callable

    from cryptography import x509
    from cryptography.hazmat.primitives.asymmetric.types import (
        CertificateIssuerPrivateKeyTypes,
    )

log = logging.getLogger(__name__)

_PRIVATE_MODE = stat.S_IRUSR | stat.S_IWUSR


def reversed_domain(domain: str) -> str:
    """Reverse the dot-separated labels of *domain*.

    ``"*.example.com"`` becomes ``"com.example.*"``.
    """
    return ".".join(reversed(domain.split(".")))


def read_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        msg = f"File not found: {path}"
        raise StorageError(msg) from None
    except OSError as exc:
        msg = f"Failed to read {path}: {exc}"
        raise StorageError(msg) from exc


def write_file(content: bytes, dest: Path, *, private: bool = False) -> Path:
    """Write *content* to *dest*, replacing any existing file.

    With *private*, the file is created readable by its owner only.

    Returns
    -------
    Path
        The path that was written.

    """
    try:
        if private:
            fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _PRIVATE_MODE)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.chmod(dest, _PRIVATE_MODE)
        else:
            dest.write_bytes(content)
    except OSError as exc:
        msg = f"Failed to write {dest}: {exc}"
        raise StorageError(msg) from exc
    return dest


class CAStore:
    """Resolves key and certificate paths inside *config_dir*."""

    def __init__(self, config_dir: Path) -> None:
        self._dir = Path(config_dir)

    @property
    def config_dir(self) -> Path:
        return self._dir

    @property
    def ca_key(self) -> Path:
        return self._dir / "ca.key.pem"

    @property
    def ca_cert(self) -> Path:
        return self._dir / "ca.cert.pem"

    @property
    def intermediate_key(self) -> Path:
        return self._dir / "intermediate.key.pem"

    @property
    def intermediate_cert(self) -> Path:
        return self._dir / "intermediate.cert.pem"

    def server_key(self, domain: str) -> Path:
        return self._dir / f"{reversed_domain(domain)}.key.pem"

    def server_cert(self, domain: str) -> Path:
        return self._dir / f"{reversed_domain(domain)}.cert.pem"

    def __repr__(self) -> str:
        return f"<CAStore config_dir={self._dir}>"


def get_private_key(generate: bool, path: Path, bits: int) -> CertificateIssuerPrivateKeyTypes:
    """Generate a fresh RSA key or load the one stored at *path*.

    A generated key is returned without being written; the caller
    decides when to persist it.
    """
    if generate:
        return generate_private_key(bits)
    return load_private_key(read_file(path))


def get_certificate(
    generate: bool,
    path: Path,
    create: Callable[[], x509.Certificate],
) -> x509.Certificate:
    """Issue a certificate via *create* and write it, or load it from *path*."""
    if generate:
        cert = create()
        write_file(certificate_to_pem(cert), path)
        return cert
    return load_certificate(read_file(path))
