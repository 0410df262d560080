"""Phone number normalization."""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str, country_code: str = "62") -> str:
    """Return ``phone`` in canonical international form, e.g. ``+6281234567890``.

    Local numbers with a leading trunk ``0`` get the country code instead;
    numbers already starting with the country code only gain the ``+``;
    bare subscriber numbers are prefixed with the country code.

    Raises
    ------
    ValueError
        If fewer than 8 or more than 15 digits remain.
    """

    digits = _NON_DIGITS.sub("", phone or "")
    if phone and phone.strip().startswith("00"):
        digits = digits[2:]
    if digits.startswith("0"):
        digits = country_code + digits.lstrip("0")
    elif not digits.startswith(country_code):
        digits = country_code + digits
    if not 8 <= len(digits) <= 15:
        raise ValueError("invalid phone number")
    return "+" + digits


def format_phone(phone: str, country_code: str = "62") -> str:
    """Return a display form such as ``+62 812-3456-7890``."""

    normalized = normalize_phone(phone, country_code)
    prefix = "+" + country_code
    rest = normalized[len(prefix):]
    if len(rest) < 10:
        return normalized
    return f"{prefix} {rest[:3]}-{rest[3:7]}-{rest[7:]}"
