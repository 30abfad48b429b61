"""Subject descriptor: the identity fields and alternative names of a request."""
import enum
import ipaddress
import re
import string
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .errors import ExtensionBuildError

_DNS_LABEL = re.compile(r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)")

# DNS comparisons ignore ASCII case only
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class AltNameKind(enum.Enum):
    DNS = "DNS"
    IP = "IP"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"unknown alt name kind: {value!r}") from None


def _check_dns_name(name: str):
    labels = name.split(".")
    if labels[0] == "*":
        labels = labels[1:]
    if not labels or len(name) > 253 or not all(_DNS_LABEL.fullmatch(label) for label in labels):
        raise ExtensionBuildError(f"invalid DNS name {name!r}", step="subject_alt_name")


def _check_ip_address(name: str):
    try:
        ipaddress.ip_address(name)
    except ValueError as e:
        raise ExtensionBuildError(f"invalid IP address {name!r}", step="subject_alt_name") from e


@dataclass(frozen=True)
class SubjectDescriptor:
    """
    Immutable description of a certificate subject.

    ``common_name`` is always present (it may be empty, in which case the
    name builder rejects it). Every entry of ``alt_names`` is of the single
    ``alt_name_kind``; they are checked here, once, when the value is built.
    """
    common_name: str
    alt_names: Optional[Tuple[str, ...]] = None
    alt_name_kind: AltNameKind = AltNameKind.DNS
    country: Optional[str] = None
    org_name: Optional[str] = None
    org_unit: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.common_name, str):
            raise TypeError("common_name must be a string")
        for attr in ("country", "org_name", "org_unit", "description"):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{attr} must be a string or None")

        object.__setattr__(self, "alt_name_kind", AltNameKind.parse(self.alt_name_kind))

        if self.alt_names is not None:
            if isinstance(self.alt_names, str):
                raise TypeError("alt_names must be a sequence of strings, not a string")
            names = tuple(self.alt_names)
            check = _check_ip_address if self.alt_name_kind is AltNameKind.IP else _check_dns_name
            for name in names:
                if not isinstance(name, str):
                    raise TypeError("alt_names entries must be strings")
                check(name)
            object.__setattr__(self, "alt_names", names)

    @classmethod
    def from_mapping(cls, data):
        """Build a descriptor from JSON-like input, ignoring unknown keys."""
        if "common_name" not in data:
            raise KeyError("common_name")
        alt_names = data.get("alt_names")
        return cls(
            common_name=data["common_name"],
            alt_names=tuple(alt_names) if isinstance(alt_names, (list, tuple)) else alt_names,
            alt_name_kind=data.get("alt_name_kind") or AltNameKind.DNS,
            country=data.get("country"),
            org_name=data.get("org_name"),
            org_unit=data.get("org_unit"),
            description=data.get("description"),
        )

    def with_alt_names(self, alt_names, kind=AltNameKind.DNS):
        return replace(self, alt_names=tuple(alt_names), alt_name_kind=kind)

    @property
    def alt_names_are_ip(self) -> bool:
        return self.alt_name_kind is AltNameKind.IP

    def all_names(self):
        return all_names(self)


def all_names(descriptor: SubjectDescriptor):
    """
    Common name first, then every alt name not already listed.

    Comparison ignores ASCII case only; the first spelling wins.
    """
    names = [descriptor.common_name]
    seen = {descriptor.common_name.translate(_ASCII_LOWER)}
    for name in descriptor.alt_names or ():
        key = name.translate(_ASCII_LOWER)
        if key not in seen:
            seen.add(key)
            names.append(name)
    return names
