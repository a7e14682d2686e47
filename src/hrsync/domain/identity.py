"""National tax id (CPF) helpers.

The digits-only form is the only one used for equality and lookups; the masked
``XXX.XXX.XXX-XX`` form only appears in canonical records and outbound requests.
"""

from __future__ import annotations

import re
from typing import Final

IDENTITY_LENGTH: Final[int] = 11

_NON_DIGITS = re.compile(r"[^0-9]+")


def only_digits(value: str | None) -> str:
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def is_valid_identity(digits: str) -> bool:
    return len(digits) == IDENTITY_LENGTH and digits.isascii() and digits.isdigit()


def identity_key(value: str | None) -> str:
    """Digits of ``value`` when they form a full identity, otherwise ``""``."""

    digits = only_digits(value)
    return digits if is_valid_identity(digits) else ""


def format_mask(value: str | None) -> str:
    """``"48917993826"`` -> ``"489.179.938-26"``; other inputs come back unchanged."""

    digits = only_digits(value)
    if len(digits) != IDENTITY_LENGTH:
        return value or ""
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def strip_mask(value: str | None) -> str:
    return only_digits(value)


def redact_identity(value: str | None) -> str:
    """Masked form for log lines: only the middle six digits stay visible."""

    digits = only_digits(value)
    if len(digits) != IDENTITY_LENGTH:
        return "<no identity>"
    return f"***.{digits[3:6]}.{digits[6:9]}-**"
