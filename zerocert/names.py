import re

from cryptography import x509
from cryptography.x509.oid import NameOID, ObjectIdentifier

from .errors import EncodingError

# id-at-description, which NameOID does not name
DESCRIPTION = ObjectIdentifier("2.5.4.13")

_SHORT_NAMES = {DESCRIPTION: "description"}

# PrintableString alphabet, used for countryName
_PRINTABLE = re.compile(r"^[A-Za-z0-9 '()+,\-./:=?]*$")

# (min, max) characters, upper bounds from RFC 5280 appendix A
_LENGTH_LIMITS = {
    NameOID.COMMON_NAME: (1, 64),
    NameOID.COUNTRY_NAME: (2, 2),
    NameOID.ORGANIZATION_NAME: (1, 64),
    NameOID.ORGANIZATIONAL_UNIT_NAME: (1, 64),
    DESCRIPTION: (1, 1024),
}


def _attribute(label, oid, value) -> x509.NameAttribute:
    low, high = _LENGTH_LIMITS[oid]
    if not low <= len(value) <= high:
        raise EncodingError(f"{label} must be {low}..{high} characters, got {value!r}", step="subject")
    if oid == NameOID.COUNTRY_NAME and not _PRINTABLE.match(value):
        raise EncodingError(f"{label} is not a PrintableString: {value!r}", step="subject")
    try:
        return x509.NameAttribute(oid, value)
    except (ValueError, TypeError) as e:
        raise EncodingError(f"cannot encode {label} {value!r}", step="subject") from e


def build_name(descriptor) -> x509.Name:
    """
    Distinguished name in the fixed order CN, C, O, OU, description.

    Optional fields that are unset or empty are left out. Every request and
    certificate subject is derived here so the order never diverges.
    """
    attributes = [_attribute("commonName", NameOID.COMMON_NAME, descriptor.common_name)]

    optional = [
        ("countryName", NameOID.COUNTRY_NAME, descriptor.country),
        ("organizationName", NameOID.ORGANIZATION_NAME, descriptor.org_name),
        ("organizationalUnitName", NameOID.ORGANIZATIONAL_UNIT_NAME, descriptor.org_unit),
        ("description", DESCRIPTION, descriptor.description),
    ]
    for label, oid, value in optional:
        if value:
            attributes.append(_attribute(label, oid, value))

    return x509.Name(attributes)


def format_name(name: x509.Name) -> str:
    """RFC 4514 style string, attributes in build order (CN first)."""
    return ",".join(attr.rfc4514_string(_SHORT_NAMES) for attr in name)
