from __future__ import annotations

import re

from .exceptions import CPEParseError
from .models import CPE

_UNESCAPED_COLON = re.compile(r"(?<!\\):")

APPLICATION_PART = "a"


def parse_cpe(text: str) -> CPE:
    """Parse a CPE 2.3 formatted string.

    Example: ``cpe:2.3:a:openssl:openssl:1.1.1:*:*:*:*:*:*:*``
    """
    fields = _UNESCAPED_COLON.split(text)
    if len(fields) < 6 or fields[0] != "cpe" or fields[1] != "2.3":
        raise CPEParseError(f"not a CPE 2.3 string: {text!r}")
    part, vendor, product, version = fields[2:6]
    if not part or not vendor or not product:
        raise CPEParseError(f"CPE missing part/vendor/product: {text!r}")
    return CPE(part=part, vendor=vendor, product=product, version=version)


def has_concrete_version(version: str) -> bool:
    """``*`` means any version and ``-`` means not applicable."""
    return version not in ("", "*", "-")
