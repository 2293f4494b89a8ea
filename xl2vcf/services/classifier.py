from __future__ import annotations

import math
import re
from typing import Any

"""Cell classification predicates.

Pure helpers deciding whether a single raw cell looks like a phone number
or a name. Any cell is coerced to text first; there are no error cases.
"""

__all__ = [
    "cell_text",
    "digits_only",
    "is_empty_cell",
    "is_phone_like",
    "is_name_like",
    "MIN_PHONE_DIGITS",
]

MIN_PHONE_DIGITS = 6

_NON_DIGIT = re.compile(r"[^0-9]")
_ASCII_LETTER = re.compile(r"[a-zA-Z]")


def is_empty_cell(cell: Any) -> bool:
    """True for absent cells: None, NaN and falsy scalars ("" / 0 / False)."""
    if cell is None:
        return True
    if isinstance(cell, float) and math.isnan(cell):
        return True
    return not cell


def cell_text(cell: Any) -> str:
    """Render a raw cell as text without surrounding whitespace.

    Integral floats lose their fractional part so that a phone number read
    as ``9876543210.0`` keeps its digit count.
    """
    if is_empty_cell(cell):
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def digits_only(text: str) -> str:
    """Delete every non-digit character, keeping digit order."""
    return _NON_DIGIT.sub("", text)


def is_phone_like(cell: Any) -> bool:
    text = cell_text(cell)
    if not text:
        return False
    return len(digits_only(text)) >= MIN_PHONE_DIGITS


def is_name_like(cell: Any) -> bool:
    text = cell_text(cell)
    if not text:
        return False
    if is_phone_like(text):
        return False
    if "@" in text:
        return False
    return _ASCII_LETTER.search(text) is not None
