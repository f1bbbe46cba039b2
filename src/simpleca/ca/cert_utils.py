"""Shared certificate-building helpers for the extension assembler.

Provides the per-tier key-usage and extended-key-usage values, authority key
identifier derivation from a signing context, and the legacy Netscape
markers carried by server certificates.
"""

from __future__ import annotations

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID

from simpleca.core.errors import EncodingError

# ---------------------------------------------------------------------------
# Key usage / EKU per tier
# ---------------------------------------------------------------------------


def ca_key_usage() -> x509.KeyUsage:
    """digitalSignature, keyCertSign and cRLSign for both CA tiers."""
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=True,
        crl_sign=True,
        encipher_only=False,
        decipher_only=False,
    )


def server_key_usage() -> x509.KeyUsage:
    """digitalSignature, nonRepudiation and keyEncipherment.

    ``content_commitment`` is the RFC 5280 name of nonRepudiation.
    """
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=True,
        key_encipherment=True,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=False,
        crl_sign=False,
        encipher_only=False,
        decipher_only=False,
    )


def server_eku() -> x509.ExtendedKeyUsage:
    return x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH])


# ---------------------------------------------------------------------------
# Key identifiers
# ---------------------------------------------------------------------------


def context_key_identifier(context: x509.Certificate) -> bytes:
    """Return the key identifier of the signing-context certificate.

    Uses the certificate's own subjectKeyIdentifier when present and
    falls back to the identifier derived from its public key.
    """
    try:
        ski = context.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)
    except x509.ExtensionNotFound:
        return x509.SubjectKeyIdentifier.from_public_key(
            context.public_key(),  # type: ignore[arg-type]
        ).digest
    return ski.value.digest


def build_authority_key_identifier(
    context: x509.Certificate,
    *,
    include_issuer: bool,
) -> x509.AuthorityKeyIdentifier:
    """Build the AKI of a certificate signed by *context*'s key.

    With *include_issuer*, the context certificate's issuer name and
    serial number are added next to the key identifier.
    """
    key_id = context_key_identifier(context)
    if not include_issuer:
        return x509.AuthorityKeyIdentifier(
            key_identifier=key_id,
            authority_cert_issuer=None,
            authority_cert_serial_number=None,
        )
    return x509.AuthorityKeyIdentifier(
        key_identifier=key_id,
        authority_cert_issuer=[x509.DirectoryName(context.issuer)],
        authority_cert_serial_number=context.serial_number,
    )


# ---------------------------------------------------------------------------
# Legacy Netscape extensions
# ---------------------------------------------------------------------------

NETSCAPE_CERT_TYPE_OID = x509.ObjectIdentifier("2.16.840.1.113730.1.1")
NETSCAPE_COMMENT_OID = x509.ObjectIdentifier("2.16.840.1.113730.1.13")

SERVER_CERT_COMMENT = "Simple CA Generated Server Certificate"

# BIT STRING, 6 unused bits, bit 1 (sslServer) set.
_NS_CERT_TYPE_SSL_SERVER = b"\x03\x02\x06\x40"


def netscape_cert_type_ssl_server() -> x509.UnrecognizedExtension:
    """nsCertType carrying only the "SSL Server" flag."""
    return x509.UnrecognizedExtension(NETSCAPE_CERT_TYPE_OID, _NS_CERT_TYPE_SSL_SERVER)


def netscape_comment(text: str) -> x509.UnrecognizedExtension:
    """nsComment holding *text* as a DER IA5String."""
    try:
        body = text.encode("ascii")
    except UnicodeEncodeError as exc:
        msg = f"Netscape comment must be ASCII: {text!r}"
        raise EncodingError(msg) from exc
    return x509.UnrecognizedExtension(NETSCAPE_COMMENT_OID, b"\x16" + _der_length(len(body)) + body)


def _der_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    encoded = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(encoded)]) + encoded
