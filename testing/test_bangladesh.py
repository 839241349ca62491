"""Phone, digit and currency helpers."""

import pytest

from babui.utils.bangladesh import (
    format_bangladeshi_phone,
    format_bdt,
    from_bengali_number,
    to_bengali_number,
    validate_bangladeshi_phone,
)


@pytest.mark.parametrize(
    "phone,valid",
    [
        ("01712345678", True),
        ("+880 1712-345678", False),
        ("8801712345678", False),
        ("88001712345678", True),
        ("01212345678", False),
        ("0171234567", False),
        ("", False),
    ],
)
def test_validate_phone(phone, valid):
    assert validate_bangladeshi_phone(phone) is valid


def test_format_phone():
    assert format_bangladeshi_phone("01712-345678") == "+880-0171-2345678"
    assert format_bangladeshi_phone("12345") == "12345"


def test_bengali_digits():
    assert to_bengali_number(2024) == "২০২৪"
    assert from_bengali_number("২০২৪") == 2024
    assert from_bengali_number("abc") == 0


def test_format_bdt():
    assert format_bdt(12500) == "৳12,500"
    assert format_bdt(12500, "bn") == "৳১২,৫০০"
