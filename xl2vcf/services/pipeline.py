from __future__ import annotations

import logging

from ..models.config_models import ConversionConfig
from ..models.contact import Contact
from ..models.workbook import RawGrid, SheetSelection, Workbook
from .detector import detect_columns
from .normalizer import normalize_rows
from .vcf_encoder import encode_vcf

"""Pipeline composition for one sheet.

``process`` is re-run by the caller on every config change; ``export_vcf``
is only called when the user actually exports. Switching sheets goes through
``select_sheet`` which re-detects columns from scratch and clears the filter.
"""

__all__ = [
    "process",
    "select_sheet",
    "export_vcf",
    "column_options",
    "filter_values",
    "ColumnOption",
]

logger = logging.getLogger(__name__)

COLUMN_SCAN_ROWS = 10
HEADER_LABEL_MAX = 20

ColumnOption = tuple[int, str]


def process(grid: RawGrid, config: ConversionConfig) -> list[Contact]:
    """Contacts for ``grid`` under ``config`` (pure, deterministic)."""
    return normalize_rows(
        grid,
        config.name_column,
        config.number_column,
        filter_column=config.filter_column,
        filter_text=config.filter_text,
    )


def select_sheet(workbook: Workbook, sheet_name: str, prefix: str = "") -> SheetSelection:
    """Load a sheet and build a fresh config for it.

    Column indices from a previously selected sheet are never reused.
    """
    grid = workbook.grid(sheet_name)
    guess = detect_columns(grid)
    config = ConversionConfig.from_guess(guess, prefix=prefix)
    logger.debug(
        f"sheet '{sheet_name}': rows={len(grid)} name_col={config.name_column} number_col={config.number_column}"
    )
    return SheetSelection(sheet_name=sheet_name, grid=grid, config=config)


def export_vcf(contacts: list[Contact], prefix: str = "", escape: bool = False) -> str:
    return encode_vcf(contacts, prefix, escape=escape)


def _column_letter_label(idx: int) -> str:
    if idx >= 26:
        return f"Col {idx + 1}"
    return f"Col {chr(65 + idx)}"


def column_options(grid: RawGrid) -> list[ColumnOption]:
    """Selectable columns as (index, label), e.g. ``(0, "Col A: Name")``.

    The width is the longest of the first rows; labels use the first row as
    header text, truncated to 20 characters.
    """
    if not grid:
        return []
    first_row = grid[0]
    width = max(len(row) for row in grid[:COLUMN_SCAN_ROWS])

    options: list[ColumnOption] = []
    for idx in range(width):
        label = _column_letter_label(idx)
        header = first_row[idx] if idx < len(first_row) else None
        if header:
            text = str(header)
            if len(text) > HEADER_LABEL_MAX:
                text = text[:HEADER_LABEL_MAX] + "..."
            label = f"{label}: {text}"
        options.append((idx, label))
    return options


def filter_values(grid: RawGrid, column: int | None) -> list[str]:
    """Sorted distinct non-empty values of a column, header row skipped."""
    if column is None or not grid:
        return []
    values: set[str] = set()
    for row in grid[1:]:
        if column < len(row) and row[column] is not None:
            val = str(row[column]).strip()
            if val:
                values.add(val)
    return sorted(values)
