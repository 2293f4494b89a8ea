from __future__ import annotations

import math
from typing import Any

from ..models.workbook import RawRow

"""Row filter: keep rows whose filter cell contains any of the given terms.

Terms come from comma separated free text; matching is a case-insensitive
substring test, OR-combined across terms.
"""

__all__ = [
    "parse_filter_terms",
    "filter_cell_text",
    "row_passes",
]


def parse_filter_terms(filter_text: str | None) -> list[str]:
    """Split on commas, trim, lower-case and drop empty terms."""
    if not filter_text:
        return []
    terms = (t.strip().lower() for t in filter_text.split(","))
    return [t for t in terms if t]


def filter_cell_text(cell: Any) -> str:
    """Lower-cased text of a filter cell; only missing cells become "".

    Unlike name/number cells, ``0`` and ``False`` are real values here.
    """
    if cell is None or (isinstance(cell, float) and math.isnan(cell)):
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).lower()


def row_passes(row: RawRow, filter_column: int | None, terms: list[str]) -> bool:
    """Decide whether a row survives the filter.

    Every row passes when the filter is disabled: no column, a negative
    column (``-1``) or no terms.
    """
    if filter_column is None or filter_column < 0 or not terms:
        return True
    cell = row[filter_column] if filter_column < len(row) else None
    value = filter_cell_text(cell)
    return any(term in value for term in terms)
