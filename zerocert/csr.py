import logging

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization

from .errors import ExtensionBuildError, SigningError
from .extensions import request_extensions
from .names import build_name, format_name

logger = logging.getLogger(__name__)


def sign_sha256(builder, private_key, step="sign"):
    """Sign a request or certificate builder with SHA-256."""
    try:
        return builder.sign(private_key=private_key, algorithm=hashes.SHA256())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise SigningError("SHA-256 signature failed", step=step) from e


def add_extensions(builder, extensions):
    for extension, critical in extensions:
        try:
            builder = builder.add_extension(extension, critical=critical)
        except (ValueError, TypeError) as e:
            raise ExtensionBuildError(f"cannot add {type(extension).__name__}", step="extensions") from e
    return builder


def build_csr(private_key, descriptor) -> x509.CertificateSigningRequest:
    """
    Self-signed PKCS#10 request for ``descriptor``, bound to ``private_key``.

    Extensions: keyUsage {digitalSignature, keyEncipherment} and, when alt
    names are set, subjectAltName. Neither is critical.
    """
    # 1. subject
    name = build_name(descriptor)

    # 2. request body + extension block
    builder = x509.CertificateSigningRequestBuilder().subject_name(name)
    builder = add_extensions(builder, request_extensions(descriptor))

    # 3. self-signature
    csr = sign_sha256(builder, private_key)
    logger.debug("built CSR subject=%s", format_name(csr.subject))
    return csr


def to_pem(obj) -> str:
    """PEM text of a CSR or certificate."""
    return obj.public_bytes(serialization.Encoding.PEM).decode("ascii")
