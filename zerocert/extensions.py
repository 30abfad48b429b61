"""
X.509v3 extension sets for requests and certificates.

Which set a certificate gets is decided by its signing context: ``SelfSigned``
produces the CA profile, ``IssuedBy(ca_certificate)`` the end-entity profile
chained to that CA.
"""
import ipaddress
from dataclasses import dataclass
from typing import Any, Optional

from cryptography import x509

from .descriptor import AltNameKind
from .errors import ExtensionBuildError


@dataclass(frozen=True)
class SelfSigned:
    pass


@dataclass(frozen=True)
class IssuedBy:
    """
    Issuer-chained context.

    Without ``key`` the certificate is signed by its own subject key and the
    AuthorityKeyIdentifier identifies nothing. With the CA's private key the
    certificate is signed by the CA and the AKI carries the CA's key id.
    """
    certificate: x509.Certificate
    key: Optional[Any] = None


SELF_SIGNED = SelfSigned()


def key_usage(digital_signature=False, content_commitment=False, key_encipherment=False,
              key_cert_sign=False, crl_sign=False) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=digital_signature,
        content_commitment=content_commitment,
        key_encipherment=key_encipherment,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=key_cert_sign,
        crl_sign=crl_sign,
        encipher_only=False,
        decipher_only=False,
    )


def subject_alt_name(descriptor) -> Optional[x509.SubjectAlternativeName]:
    """One SAN extension holding every alt name in order, or None."""
    if not descriptor.alt_names:
        return None
    try:
        if descriptor.alt_name_kind is AltNameKind.IP:
            general_names = [x509.IPAddress(ipaddress.ip_address(n)) for n in descriptor.alt_names]
        else:
            general_names = [x509.DNSName(n) for n in descriptor.alt_names]
        return x509.SubjectAlternativeName(general_names)
    except (ValueError, TypeError) as e:
        raise ExtensionBuildError("cannot build subjectAltName", step="subject_alt_name") from e


def authority_key_identifier(context: IssuedBy) -> x509.AuthorityKeyIdentifier:
    if context.key is None:
        # neither keyid nor issuer populated
        return x509.AuthorityKeyIdentifier(
            key_identifier=None,
            authority_cert_issuer=None,
            authority_cert_serial_number=None,
        )
    try:
        ski = context.certificate.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
        return x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(ski)
    except x509.ExtensionNotFound:
        return x509.AuthorityKeyIdentifier.from_issuer_public_key(context.certificate.public_key())


def request_extensions(descriptor):
    """(extension, critical) pairs for a certificate signing request."""
    extensions = [(key_usage(digital_signature=True, key_encipherment=True), False)]
    san = subject_alt_name(descriptor)
    if san is not None:
        extensions.append((san, False))
    return extensions


def certificate_extensions(public_key, descriptor, context):
    """
    (extension, critical) pairs for a certificate, in emission order.

    The SubjectKeyIdentifier always comes from ``public_key``, the key being
    certified, in both contexts.
    """
    try:
        ski = x509.SubjectKeyIdentifier.from_public_key(public_key)
    except (ValueError, TypeError) as e:
        raise ExtensionBuildError("cannot compute subjectKeyIdentifier", step="subject_key_identifier") from e

    if isinstance(context, SelfSigned):
        return [
            (x509.BasicConstraints(ca=True, path_length=None), True),
            (key_usage(key_cert_sign=True, crl_sign=True), True),
            (ski, False),
        ]

    if not isinstance(context, IssuedBy):
        raise TypeError(f"unknown signing context: {context!r}")

    try:
        aki = authority_key_identifier(context)
    except (ValueError, TypeError) as e:
        raise ExtensionBuildError("cannot compute authorityKeyIdentifier", step="authority_key_identifier") from e

    extensions = [
        (x509.BasicConstraints(ca=False, path_length=None), False),
        (key_usage(content_commitment=True, digital_signature=True, key_encipherment=True), True),
        (ski, False),
        (aki, False),
    ]
    san = subject_alt_name(descriptor)
    if san is not None:
        extensions.append((san, False))
    return extensions
