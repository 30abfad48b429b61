import pytest

from zerocert import SubjectDescriptor, build_ca, generate_key


@pytest.fixture(scope="session")
def key():
    return generate_key()


@pytest.fixture(scope="session")
def key2():
    return generate_key()


@pytest.fixture(scope="session")
def ca_key():
    return generate_key()


@pytest.fixture(scope="session")
def ca_cert(ca_key):
    return build_ca(ca_key, SubjectDescriptor("Test Root CA", country="AU", org_name="Lit"), validity_days=30)


@pytest.fixture
def dns_descriptor():
    return SubjectDescriptor(
        common_name="example.com",
        alt_names=("www.example.com", "www2.example.com"),
        country="AU",
        org_name="Lit",
        org_unit="Node Devs",
    )


@pytest.fixture
def ip_descriptor():
    return SubjectDescriptor(
        common_name="172.33.33.33",
        alt_names=("172.33.33.33", "172.33.33.34"),
        alt_name_kind="IP",
    )
