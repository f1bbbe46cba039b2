"""Key-material provider and PEM codec.

RSA keys are generated with public exponent 65537 and written as
unencrypted PKCS#8 PEM.  Certificates are exchanged as PEM.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from simpleca.core.errors import EncodingError, KeyMaterialError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import (
        CertificateIssuerPrivateKeyTypes,
    )

RSA_PUBLIC_EXPONENT = 65537


def generate_private_key(bits: int) -> rsa.RSAPrivateKey:
    """Generate an RSA private key of *bits* length."""
    try:
        return rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=bits)
    except ValueError as exc:
        msg = f"Cannot generate a {bits}-bit RSA key: {exc}"
        raise KeyMaterialError(msg) from exc


def load_private_key(pem: bytes) -> CertificateIssuerPrivateKeyTypes:
    """Decode an unencrypted PEM private key."""
    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (TypeError, ValueError) as exc:
        msg = f"Failed to decode private key: {exc}"
        raise KeyMaterialError(msg) from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        msg = f"Unsupported private key type {type(key).__name__}; expected RSA"
        raise KeyMaterialError(msg)
    return key


def private_key_to_pem(key: CertificateIssuerPrivateKeyTypes) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def load_certificate(pem: bytes) -> x509.Certificate:
    """Decode a PEM certificate."""
    try:
        return x509.load_pem_x509_certificate(pem)
    except ValueError as exc:
        msg = f"Failed to decode certificate: {exc}"
        raise EncodingError(msg) from exc


def certificate_to_pem(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)
