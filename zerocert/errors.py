"""Exceptions raised while assembling keys, requests and certificates."""


class CertificateError(Exception):
    """Base class. ``step`` names the construction step that failed."""

    def __init__(self, message, step=None):
        super().__init__(message)
        self.step = step

    def __str__(self):
        msg = super().__str__()
        if self.step:
            msg = f"{self.step}: {msg}"
        if self.__cause__ is not None:
            msg = f"{msg}: {self.__cause__}"
        return msg


class EncodingError(CertificateError):
    pass


class KeyGenerationError(CertificateError):
    pass


class ExtensionBuildError(CertificateError):
    pass


class SigningError(CertificateError):
    pass


class IssuanceError(CertificateError):
    """The issuance API reported a failure in its response body."""

    def __init__(self, code=None, type=None, details=None):
        parts = [str(p) for p in (code, type, details) if p is not None]
        super().__init__(": ".join(parts) or "request failed", step="issue")
        self.code = code
        self.type = type
        self.details = details


class ValidityError(CertificateError):
    """The requested validity window cannot be represented."""
