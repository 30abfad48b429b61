import pytest

from zerocert import AltNameKind, ExtensionBuildError, SubjectDescriptor, all_names


def test_all_names_drops_self_duplicate(ip_descriptor):
    assert all_names(ip_descriptor) == ["172.33.33.33", "172.33.33.34"]


def test_all_names_common_name_first(dns_descriptor):
    assert dns_descriptor.all_names() == ["example.com", "www.example.com", "www2.example.com"]


def test_all_names_case_insensitive():
    d = SubjectDescriptor("Example.com", alt_names=("EXAMPLE.COM", "www.example.com", "WWW.example.com"))
    assert all_names(d) == ["Example.com", "www.example.com"]


def test_all_names_without_alt_names():
    assert all_names(SubjectDescriptor("example.com")) == ["example.com"]


def test_alt_names_are_frozen_to_tuple():
    d = SubjectDescriptor("example.com", alt_names=["a.example.com"])
    assert d.alt_names == ("a.example.com",)
    assert d.alt_name_kind is AltNameKind.DNS
    assert not d.alt_names_are_ip


def test_kind_accepts_strings():
    d = SubjectDescriptor("10.0.0.1", alt_names=("10.0.0.1",), alt_name_kind="ip")
    assert d.alt_name_kind is AltNameKind.IP
    assert d.alt_names_are_ip


def test_unknown_kind():
    with pytest.raises(ValueError):
        SubjectDescriptor("example.com", alt_name_kind="email")


def test_invalid_ip_literal():
    with pytest.raises(ExtensionBuildError) as exc:
        SubjectDescriptor("host", alt_names=("10.0.0.300",), alt_name_kind=AltNameKind.IP)
    assert exc.value.step == "subject_alt_name"
    assert isinstance(exc.value.__cause__, ValueError)


@pytest.mark.parametrize("name", [
    "-bad.example.com",
    "bad..example.com",
    "under_score!.com",
    "",
    "a" * 64 + ".com",
    "www.example.com\n",
    "www\n.example.com",
])
def test_invalid_dns_name(name):
    with pytest.raises(ExtensionBuildError):
        SubjectDescriptor("example.com", alt_names=(name,))


def test_wildcard_dns_name():
    d = SubjectDescriptor("example.com", alt_names=("*.example.com",))
    assert d.alt_names == ("*.example.com",)


def test_alt_names_string_rejected():
    with pytest.raises(TypeError):
        SubjectDescriptor("example.com", alt_names="www.example.com")


def test_descriptor_is_immutable(dns_descriptor):
    with pytest.raises(AttributeError):
        dns_descriptor.country = "NZ"


def test_with_alt_names_returns_copy(dns_descriptor):
    d = dns_descriptor.with_alt_names(["10.1.1.1"], AltNameKind.IP)
    assert d.alt_names == ("10.1.1.1",)
    assert dns_descriptor.alt_names == ("www.example.com", "www2.example.com")


def test_from_mapping():
    d = SubjectDescriptor.from_mapping({
        "common_name": "example.com",
        "alt_names": ["www.example.com"],
        "country": "AU",
        "ignored": 1,
    })
    assert d == SubjectDescriptor("example.com", alt_names=("www.example.com",), country="AU")


def test_from_mapping_requires_common_name():
    with pytest.raises(KeyError):
        SubjectDescriptor.from_mapping({"country": "AU"})


def test_all_names_ignores_ascii_case_only():
    d = SubjectDescriptor("straße", alt_names=("strasse", "STRASSE"))
    assert all_names(d) == ["straße", "strasse"]
