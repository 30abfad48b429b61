import ipaddress

import pytest
from cryptography import x509
from unittest import mock

from zerocert import SigningError, SubjectDescriptor, build_csr, build_name, format_name, to_pem
from zerocert.csr import sign_sha256


def _load(csr):
    return x509.load_pem_x509_csr(to_pem(csr).encode("ascii"))


def test_dns_request(key, dns_descriptor):
    pem = to_pem(build_csr(key, dns_descriptor))
    assert pem.startswith("-----BEGIN CERTIFICATE REQUEST-----")

    csr = x509.load_pem_x509_csr(pem.encode("ascii"))
    assert csr.is_signature_valid
    assert format_name(csr.subject) == "CN=example.com,C=AU,O=Lit,OU=Node Devs"

    san = csr.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    assert not san.critical
    assert san.value.get_values_for_type(x509.DNSName) == ["www.example.com", "www2.example.com"]
    assert san.value.get_values_for_type(x509.IPAddress) == []


def test_ip_request(key, ip_descriptor):
    csr = _load(build_csr(key, ip_descriptor))
    san = csr.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.IPAddress) == [
        ipaddress.ip_address("172.33.33.33"),
        ipaddress.ip_address("172.33.33.34"),
    ]
    assert san.get_values_for_type(x509.DNSName) == []


def test_subject_round_trip(key, dns_descriptor):
    csr = _load(build_csr(key, dns_descriptor))
    assert csr.subject == build_name(dns_descriptor)
    assert list(csr.subject) == list(build_name(dns_descriptor))


def test_key_usage_not_critical(key, dns_descriptor):
    csr = build_csr(key, dns_descriptor)
    ku = csr.extensions.get_extension_for_class(x509.KeyUsage)
    assert not ku.critical
    assert ku.value.digital_signature
    assert ku.value.key_encipherment
    assert not ku.value.content_commitment
    assert not ku.value.key_cert_sign


def test_extension_order(key, dns_descriptor):
    csr = build_csr(key, dns_descriptor)
    assert [type(e.value) for e in csr.extensions] == [x509.KeyUsage, x509.SubjectAlternativeName]


def test_no_alt_names(key):
    csr = build_csr(key, SubjectDescriptor("example.com"))
    with pytest.raises(x509.ExtensionNotFound):
        csr.extensions.get_extension_for_class(x509.SubjectAlternativeName)


def test_bound_to_applicant_key(key, dns_descriptor):
    csr = build_csr(key, dns_descriptor)
    assert csr.public_key() == key.public_key()


def test_signing_failure_preserves_cause():
    builder = mock.Mock()
    builder.sign.side_effect = ValueError("bad key")
    with pytest.raises(SigningError) as exc:
        sign_sha256(builder, object())
    assert isinstance(exc.value.__cause__, ValueError)
    assert "bad key" in str(exc.value)
