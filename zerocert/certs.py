import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

from cryptography import x509

from . import config
from .csr import add_extensions, build_csr, sign_sha256
from .errors import ExtensionBuildError, ValidityError
from .extensions import SELF_SIGNED, IssuedBy, certificate_extensions
from .names import build_name, format_name

logger = logging.getLogger(__name__)

SerialSource = Callable[[], int]


def random_serial() -> int:
    """
    159-bit random serial from the OS CSPRNG.

    The top bit may be zero, so the value can be shorter than 159 bits; it
    always stays below 2**159 and therefore fits in 20 DER octets.
    """
    serial_bytes = secrets.token_bytes(20)
    serial_int = int.from_bytes(serial_bytes, byteorder="big")
    serial_int &= (1 << config.SERIAL_BITS) - 1
    return serial_int


def validity_window(days=None, now=None):
    """(not_before, not_after): midnight UTC today, plus ``days`` (default 365)."""
    if days is None:
        days = config.DEFAULT_VALIDITY_DAYS
    if days < 0:
        raise ValidityError(f"validity days must not be negative, got {days}", step="validity")
    now = now or datetime.now(timezone.utc)
    not_before = now.replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        not_after = not_before + timedelta(days=days)
    except OverflowError as e:
        raise ValidityError(f"{days} days is past the last representable date", step="validity") from e
    return not_before, not_after


def _draw_serial(serial_source: SerialSource) -> int:
    serial = serial_source()
    if serial <= 0 or serial.bit_length() > config.SERIAL_BITS:
        raise ExtensionBuildError(f"serial number out of range: {serial}", step="serial")
    return serial


def _certificate(subject, issuer, public_key, serial, validity_days, descriptor, context):
    not_before, not_after = validity_window(validity_days)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(public_key)
        .serial_number(serial)
        .not_valid_before(not_before)
        .not_valid_after(not_after)
    )
    return add_extensions(builder, certificate_extensions(public_key, descriptor, context))


def build_ca(private_key, descriptor, validity_days=None,
             serial_source: SerialSource = random_serial) -> x509.Certificate:
    """
    Self-signed CA certificate: issuer == subject, signed by ``private_key``.

    Extensions: basicConstraints CA:TRUE (critical), keyUsage {keyCertSign,
    cRLSign} (critical), subjectKeyIdentifier.
    """
    name = build_name(descriptor)
    serial = _draw_serial(serial_source)

    builder = _certificate(name, name, private_key.public_key(), serial,
                           validity_days, descriptor, SELF_SIGNED)
    cert = sign_sha256(builder, private_key)

    logger.debug("built CA certificate serial=%x subject=%s not_after=%s",
                 cert.serial_number, format_name(cert.subject), cert.not_valid_after_utc)
    return cert


def build_leaf(private_key, descriptor, ca_certificate: x509.Certificate, validity_days=None,
               serial_source: SerialSource = random_serial, ca_key=None) -> x509.Certificate:
    """
    End-entity certificate chained to ``ca_certificate``.

    The subject and alt names are taken from the same request an external CA
    would receive. By default the certificate is signed with the applicant's
    own ``private_key`` and carries an empty authorityKeyIdentifier; pass
    ``ca_key`` to have the CA sign it and identify itself in the AKI.
    """
    context = IssuedBy(ca_certificate, ca_key)

    # 1. canonical subject via the request path
    csr = build_csr(private_key, descriptor)

    # 2. body chained to the CA
    serial = _draw_serial(serial_source)
    builder = _certificate(csr.subject, ca_certificate.subject, private_key.public_key(), serial,
                           validity_days, descriptor, context)

    # 3. signature
    signer = ca_key if ca_key is not None else private_key
    cert = sign_sha256(builder, signer)

    logger.debug("built leaf certificate serial=%x subject=%s issuer=%s ca_signed=%s",
                 cert.serial_number, format_name(cert.subject), format_name(cert.issuer),
                 ca_key is not None)
    return cert
