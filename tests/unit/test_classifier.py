from __future__ import annotations

import pytest

from xl2vcf.services.classifier import cell_text, digits_only, is_name_like, is_phone_like


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("+91 (987) 654-3210", "919876543210"),
        ("abc", ""),
        ("1a2b3c", "123"),
        ("٣٤٥ 12", "12"),  # only ASCII digits are kept
        ("", ""),
    ],
)
def test_digits_only_keeps_ascii_digits_in_order(raw, expected):
    assert digits_only(raw) == expected


def test_cell_text_renders_integral_floats_without_fraction():
    assert cell_text(9876543210.0) == "9876543210"
    assert cell_text(12.5) == "12.5"
    assert cell_text(42) == "42"
    assert cell_text("  Alice  ") == "Alice"
    assert cell_text(True) == "true"


@pytest.mark.parametrize("empty", [None, "", 0, False, float("nan")])
def test_cell_text_empty_values(empty):
    assert cell_text(empty) == ""
    assert is_phone_like(empty) is False
    assert is_name_like(empty) is False


@pytest.mark.parametrize(
    "cell,expected",
    [
        ("123456", True),
        ("12345", False),
        ("+1 (555) 010", True),
        (9876543210, True),
        ("Room 12-34-56", True),
        ("Alice", False),
    ],
)
def test_is_phone_like_requires_six_digits(cell, expected):
    assert is_phone_like(cell) is expected


@pytest.mark.parametrize(
    "cell,expected",
    [
        ("Alice", True),
        ("O'Brien, Jr.", True),
        ("alice@example.com", False),
        ("Call 9876543210", False),  # phone-like wins
        ("12345", False),
        ("---", False),
        ("Ünal", True),  # has ASCII letters after the first char
        ("東京", False),  # no ASCII letter
    ],
)
def test_is_name_like(cell, expected):
    assert is_name_like(cell) is expected
