"""Tests for simpleca.ca.extensions and simpleca.ca.cert_utils."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from simpleca.ca.builder import create_intermediate_ca, create_root_ca, draft_root_ca
from simpleca.ca.cert_utils import (
    NETSCAPE_CERT_TYPE_OID,
    NETSCAPE_COMMENT_OID,
    ca_key_usage,
    context_key_identifier,
    netscape_comment,
    server_eku,
    server_key_usage,
)
from simpleca.ca.extensions import (
    ExtensionEntry,
    assemble_extensions,
    intermediate_extensions,
    root_draft_extensions,
    root_extensions,
    server_extensions,
)
from simpleca.ca.params import intermediate_ca_params, root_ca_params, server_cert_params
from simpleca.core.errors import EncodingError, ParameterError
from simpleca.core.types import CertTier


@pytest.fixture()
def root_params(base_name, root_key):
    return root_ca_params(base_name.to_distinguished_name(), root_key, 7200)


@pytest.fixture()
def root_cert(root_params):
    return create_root_ca(root_params)


@pytest.fixture()
def intermediate_params(base_name, intermediate_key, root_params, root_key):
    return intermediate_ca_params(
        base_name.with_common_name("Intermediate CA").to_distinguished_name(),
        intermediate_key,
        root_params.subject.name,
        root_key,
        2500,
    )


@pytest.fixture()
def intermediate_cert(intermediate_params, root_cert):
    return create_intermediate_ca(intermediate_params, root_cert)


@pytest.fixture()
def server_params(base_name, server_key, intermediate_params, intermediate_key):
    return server_cert_params(
        base_name.with_common_name("*.example.com").to_distinguished_name(),
        server_key,
        intermediate_params.subject.name,
        intermediate_key,
        370,
        ["*.another.com"],
    )


def _types(entries: list[ExtensionEntry]) -> list[type]:
    return [type(e.value) for e in entries]


class TestRootExtensions:
    def test_draft_has_only_ski(self, root_params):
        entries = root_draft_extensions(root_params)

        assert _types(entries) == [x509.SubjectKeyIdentifier]
        assert entries[0].critical is False

    def test_final_set_and_order(self, root_params):
        draft = draft_root_ca(root_params)
        entries = root_extensions(root_params, draft)

        assert _types(entries) == [
            x509.SubjectKeyIdentifier,
            x509.AuthorityKeyIdentifier,
            x509.BasicConstraints,
            x509.KeyUsage,
        ]

    def test_aki_is_keyid_only_from_draft(self, root_params):
        draft = draft_root_ca(root_params)
        aki = root_extensions(root_params, draft)[1].value

        assert aki.key_identifier == context_key_identifier(draft)
        assert aki.authority_cert_issuer is None
        assert aki.authority_cert_serial_number is None

    def test_basic_constraints_critical_ca(self, root_params):
        draft = draft_root_ca(root_params)
        bc = root_extensions(root_params, draft)[2]

        assert bc.critical is True
        assert bc.value.ca is True
        assert bc.value.path_length is None

    def test_key_usage(self, root_params):
        draft = draft_root_ca(root_params)
        ku = root_extensions(root_params, draft)[3].value

        assert ku.digital_signature
        assert ku.key_cert_sign
        assert ku.crl_sign
        assert not ku.key_encipherment
        assert not ku.content_commitment


class TestIntermediateExtensions:
    def test_set_and_order(self, intermediate_params, root_cert):
        entries = intermediate_extensions(intermediate_params, root_cert)

        assert _types(entries) == [
            x509.SubjectKeyIdentifier,
            x509.AuthorityKeyIdentifier,
            x509.BasicConstraints,
            x509.KeyUsage,
        ]

    def test_aki_carries_keyid_issuer_and_serial(self, intermediate_params, root_cert):
        aki = intermediate_extensions(intermediate_params, root_cert)[1].value
        root_ski = root_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)

        assert aki.key_identifier == root_ski.value.digest
        assert aki.authority_cert_issuer == [x509.DirectoryName(root_cert.issuer)]
        assert aki.authority_cert_serial_number == root_cert.serial_number

    def test_basic_constraints_not_critical(self, intermediate_params, root_cert):
        bc = intermediate_extensions(intermediate_params, root_cert)[2]

        assert bc.critical is False
        assert bc.value.ca is True
        assert bc.value.path_length is None


class TestServerExtensions:
    def test_set_and_order(self, server_params, intermediate_cert):
        entries = server_extensions(server_params, intermediate_cert)

        assert _types(entries) == [
            x509.SubjectKeyIdentifier,
            x509.AuthorityKeyIdentifier,
            x509.BasicConstraints,
            x509.UnrecognizedExtension,
            x509.UnrecognizedExtension,
            x509.KeyUsage,
            x509.ExtendedKeyUsage,
            x509.SubjectAlternativeName,
        ]
        assert all(e.critical is False for e in entries)

    def test_legacy_netscape_markers(self, server_params, intermediate_cert):
        entries = server_extensions(server_params, intermediate_cert)

        assert entries[3].value.oid == NETSCAPE_CERT_TYPE_OID
        assert entries[3].value.value == b"\x03\x02\x06\x40"
        assert entries[4].value.oid == NETSCAPE_COMMENT_OID
        marker = b"Simple CA Generated Server Certificate"
        assert entries[4].value.value == b"\x16" + bytes([len(marker)]) + marker

    def test_key_usage_and_eku(self, server_params, intermediate_cert):
        entries = server_extensions(server_params, intermediate_cert)
        ku = entries[5].value

        assert ku.digital_signature
        assert ku.content_commitment
        assert ku.key_encipherment
        assert not ku.key_cert_sign
        assert list(entries[6].value) == [ExtendedKeyUsageOID.SERVER_AUTH]

    def test_basic_constraints_not_ca(self, server_params, intermediate_cert):
        bc = server_extensions(server_params, intermediate_cert)[2].value

        assert bc.ca is False

    def test_san_in_order(self, server_params, intermediate_cert):
        san = server_extensions(server_params, intermediate_cert)[-1].value

        assert san.get_values_for_type(x509.DNSName) == ["*.example.com", "*.another.com"]

    def test_no_san_when_list_empty(self, server_params, intermediate_cert):
        entries = server_extensions(replace(server_params, sub_alt_names=()), intermediate_cert)

        assert x509.SubjectAlternativeName not in _types(entries)
        assert len(entries) == 7

    def test_aki_links_to_intermediate(self, server_params, intermediate_cert):
        aki = server_extensions(server_params, intermediate_cert)[1].value

        assert aki.key_identifier == context_key_identifier(intermediate_cert)
        assert aki.authority_cert_issuer == [x509.DirectoryName(intermediate_cert.issuer)]
        assert aki.authority_cert_serial_number == intermediate_cert.serial_number


class TestAssembleExtensions:
    def test_root_without_context_is_draft(self, root_params):
        entries = assemble_extensions(CertTier.ROOT, root_params, None)

        assert _types(entries) == [x509.SubjectKeyIdentifier]

    def test_dispatch_matches_tier_functions(self, server_params, intermediate_cert):
        via_dispatch = assemble_extensions(CertTier.SERVER, server_params, intermediate_cert)
        direct = server_extensions(server_params, intermediate_cert)

        assert [e.value for e in via_dispatch] == [e.value for e in direct]

    @pytest.mark.parametrize("tier", [CertTier.INTERMEDIATE, CertTier.SERVER])
    def test_context_required_below_root(self, tier, server_params):
        with pytest.raises(ParameterError, match="signing context"):
            assemble_extensions(tier, server_params, None)

    def test_deterministic(self, intermediate_params, root_cert):
        first = intermediate_extensions(intermediate_params, root_cert)
        second = intermediate_extensions(intermediate_params, root_cert)

        assert first == second


class TestCertUtils:
    def test_ca_key_usage_flags(self):
        ku = ca_key_usage()

        assert (ku.digital_signature, ku.key_cert_sign, ku.crl_sign) == (True, True, True)
        assert not ku.content_commitment
        assert not ku.key_encipherment
        assert not ku.data_encipherment
        assert not ku.key_agreement

    def test_server_key_usage_flags(self):
        ku = server_key_usage()

        assert (ku.digital_signature, ku.content_commitment, ku.key_encipherment) == (
            True,
            True,
            True,
        )
        assert not ku.key_cert_sign
        assert not ku.crl_sign
        assert not ku.data_encipherment
        assert not ku.key_agreement

    def test_server_eku_is_server_auth_only(self):
        assert list(server_eku()) == [ExtendedKeyUsageOID.SERVER_AUTH]

    def test_netscape_comment_rejects_non_ascii(self):
        with pytest.raises(EncodingError, match="ASCII"):
            netscape_comment("é")

    def test_netscape_comment_long_form_length(self):
        ext = netscape_comment("x" * 200)

        assert ext.value[:3] == b"\x16\x81\xc8"
        assert len(ext.value) == 203

    def test_context_key_identifier_without_ski(self, root_key):
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "no-ski")])
        now = datetime.now(UTC)
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(root_key.public_key())
            .serial_number(1)
            .not_valid_before(now)
            .not_valid_after(now + timedelta(days=1))
            .sign(root_key, hashes.SHA256())
        )

        expected = x509.SubjectKeyIdentifier.from_public_key(root_key.public_key()).digest
        assert context_key_identifier(cert) == expected
