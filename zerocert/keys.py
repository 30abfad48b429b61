from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from . import config
from .errors import KeyGenerationError


def generate_key(key_size: int = config.DEFAULT_KEY_SIZE) -> rsa.RSAPrivateKey:
    """Generate an RSA key pair. The public half is ``key.public_key()``."""
    try:
        return rsa.generate_private_key(public_exponent=config.PUBLIC_EXPONENT, key_size=key_size)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyGenerationError(f"cannot generate a {key_size}-bit RSA key", step="generate_key") from e


def private_key_pem(key) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def load_private_key(data: bytes):
    return serialization.load_pem_private_key(data, password=None)
