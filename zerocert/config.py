"""
Environment variable names and their defaults.

Values are read with os.getenv on every call so that a changed environment
(or monkeypatch.setenv in tests) is picked up without reloading anything.
A .env file in the working directory is loaded once at import.
"""
import os

from dotenv import load_dotenv

load_dotenv()

API_URL_ENV = "ZEROCERT_API_URL"
API_KEY_ENV = "ZEROCERT_API_KEY"
HTTP_TIMEOUT_ENV = "ZEROCERT_HTTP_TIMEOUT"
CA_CERT_ENV = "ZEROCERT_CA_CERT"
CA_KEY_ENV = "ZEROCERT_CA_KEY"
CA_NAME_ENV = "ZEROCERT_CA_NAME"

DEFAULT_API_URL = "https://api.zerossl.com"

# fixed by the certificate format, not configurable
DEFAULT_KEY_SIZE = 2048
PUBLIC_EXPONENT = 65537
DEFAULT_VALIDITY_DAYS = 365
SERIAL_BITS = 159


def api_url() -> str:
    return os.getenv(API_URL_ENV, DEFAULT_API_URL).rstrip("/")


def api_key() -> str:
    return os.getenv(API_KEY_ENV, "")


def http_timeout() -> float:
    return float(os.getenv(HTTP_TIMEOUT_ENV, "30"))


def ca_cert_path() -> str:
    return os.getenv(CA_CERT_ENV, "ca_cert.pem")


def ca_key_path() -> str:
    return os.getenv(CA_KEY_ENV, "ca_private_key.pem")


def ca_name() -> str:
    return os.getenv(CA_NAME_ENV, "zerocert Dev CA")
