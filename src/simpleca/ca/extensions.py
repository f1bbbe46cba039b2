"""X.509v3 extension sets per certificate tier.

Each assembler returns an ordered list of :class:`ExtensionEntry`.  The
order is fixed so that rebuilding a certificate from the same inputs
yields the same extension sequence.  The *context* certificate is only
used to derive the issuer's key identifier (and issuer name / serial).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography import x509

from simpleca.ca.cert_utils import (
    SERVER_CERT_COMMENT,
    build_authority_key_identifier,
    ca_key_usage,
    netscape_cert_type_ssl_server,
    netscape_comment,
    server_eku,
    server_key_usage,
)
from simpleca.core.errors import EncodingError, ParameterError
from simpleca.core.types import CertTier

if TYPE_CHECKING:
    from simpleca.ca.params import CertParams


@dataclass(frozen=True)
class ExtensionEntry:
    """One extension value and its criticality flag."""

    value: x509.ExtensionType
    critical: bool = False


def _subject_key_identifier(params: CertParams) -> ExtensionEntry:
    return ExtensionEntry(
        x509.SubjectKeyIdentifier.from_public_key(
            params.subject.key.public_key(),  # type: ignore[arg-type]
        ),
    )


def root_draft_extensions(params: CertParams) -> list[ExtensionEntry]:
    """Phase-one root extensions: the subject key identifier only."""
    return [_subject_key_identifier(params)]


def root_extensions(params: CertParams, context: x509.Certificate) -> list[ExtensionEntry]:
    """Final root extensions, *context* being the draft root certificate."""
    return [
        _subject_key_identifier(params),
        ExtensionEntry(build_authority_key_identifier(context, include_issuer=False)),
        ExtensionEntry(x509.BasicConstraints(ca=True, path_length=None), critical=True),
        ExtensionEntry(ca_key_usage()),
    ]


def intermediate_extensions(
    params: CertParams,
    context: x509.Certificate,
) -> list[ExtensionEntry]:
    """Intermediate CA extensions, *context* being the root certificate."""
    return [
        _subject_key_identifier(params),
        ExtensionEntry(build_authority_key_identifier(context, include_issuer=True)),
        ExtensionEntry(x509.BasicConstraints(ca=True, path_length=None)),
        ExtensionEntry(ca_key_usage()),
    ]


def server_extensions(params: CertParams, context: x509.Certificate) -> list[ExtensionEntry]:
    """Server certificate extensions, *context* being the intermediate.

    A subjectAltName listing every entry of ``params.sub_alt_names`` as a
    DNS name is appended when that list is non-empty.
    """
    extensions = [
        _subject_key_identifier(params),
        ExtensionEntry(build_authority_key_identifier(context, include_issuer=True)),
        ExtensionEntry(x509.BasicConstraints(ca=False, path_length=None)),
        ExtensionEntry(netscape_cert_type_ssl_server()),
        ExtensionEntry(netscape_comment(SERVER_CERT_COMMENT)),
        ExtensionEntry(server_key_usage()),
        ExtensionEntry(server_eku()),
    ]

    if params.sub_alt_names:
        try:
            san = x509.SubjectAlternativeName(
                [x509.DNSName(name) for name in params.sub_alt_names],
            )
        except (TypeError, ValueError) as exc:
            msg = f"Invalid subjectAltName entries {list(params.sub_alt_names)}: {exc}"
            raise EncodingError(msg) from exc
        extensions.append(ExtensionEntry(san))

    return extensions


def assemble_extensions(
    tier: CertTier,
    params: CertParams,
    context: x509.Certificate | None,
) -> list[ExtensionEntry]:
    """Return the extension list for *tier*.

    For :attr:`CertTier.ROOT` a ``None`` context selects the draft
    (phase-one) set.  Intermediate and server tiers require a context.
    """
    if tier is CertTier.ROOT:
        if context is None:
            return root_draft_extensions(params)
        return root_extensions(params, context)

    if context is None:
        msg = f"A signing context certificate is required for the {tier} tier"
        raise ParameterError(msg)
    if tier is CertTier.INTERMEDIATE:
        return intermediate_extensions(params, context)
    return server_extensions(params, context)
