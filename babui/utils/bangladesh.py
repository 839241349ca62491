"""Bangladesh-specific formatting and validation helpers."""

import re

BENGALI_DIGITS = "০১২৩৪৫৬৭৮৯"

_TO_BENGALI = str.maketrans("0123456789", BENGALI_DIGITS)
_FROM_BENGALI = str.maketrans(BENGALI_DIGITS, "0123456789")

# 01[3-9]XXXXXXXX, optionally prefixed with the 880 country code
MOBILE_PATTERN = re.compile(r"^(880)?01[3-9]\d{8}$")


def _digits(phone: str) -> str:
    return re.sub(r"\D", "", phone or "")


def validate_bangladeshi_phone(phone: str) -> bool:
    return bool(MOBILE_PATTERN.match(_digits(phone)))


def format_bangladeshi_phone(phone: str) -> str:
    """Format as +880-1XXX-XXXXXX; unknown shapes are returned unchanged."""
    digits = _digits(phone)
    if digits.startswith("880"):
        number = digits[3:]
        return f"+880-{number[:4]}-{number[4:]}"
    if digits.startswith("01"):
        return f"+880-{digits[:4]}-{digits[4:]}"
    return phone


def to_bengali_number(num: int | float | str) -> str:
    return str(num).translate(_TO_BENGALI)


def from_bengali_number(text: str) -> int:
    try:
        return int(text.translate(_FROM_BENGALI))
    except ValueError:
        return 0


def format_bdt(amount: float, language: str = "en") -> str:
    """Taka amount with thousands separators, e.g. ৳12,500 or ৳১২,৫০০."""
    grouped = f"{round(amount):,}"
    if language == "bn":
        grouped = to_bengali_number(grouped)
    return f"৳{grouped}"
