from .certs import SerialSource, build_ca, build_leaf, random_serial, validity_window
from .csr import build_csr, to_pem
from .descriptor import AltNameKind, SubjectDescriptor, all_names
from .errors import (
    CertificateError,
    EncodingError,
    ExtensionBuildError,
    IssuanceError,
    KeyGenerationError,
    SigningError,
    ValidityError,
)
from .extensions import SELF_SIGNED, IssuedBy, SelfSigned
from .keys import generate_key, private_key_pem
from .names import build_name, format_name

__version__ = "0.1.0"
