from __future__ import annotations

import logging

from ..models.contact import MIN_NUMBER_DIGITS, Contact, ContactStats
from ..models.workbook import RawGrid, RawRow
from .classifier import cell_text, digits_only
from .row_filter import parse_filter_terms, row_passes

"""Row -> Contact normalization.

Each grid row is filtered, trimmed and validated in a single pass. Rows that
are filtered out or empty in both the name and number columns produce no
Contact at all; ids keep the original row position.
"""

__all__ = [
    "normalize_rows",
    "contact_stats",
    "is_valid_contact",
]

logger = logging.getLogger(__name__)


def _cell(row: RawRow, index: int) -> str:
    if index < 0 or index >= len(row):
        return ""
    return cell_text(row[index])


def is_valid_contact(name: str, cleaned_number: str) -> bool:
    return len(cleaned_number) >= MIN_NUMBER_DIGITS and len(name) > 0


def normalize_rows(
    grid: RawGrid,
    name_column: int,
    number_column: int,
    filter_column: int | None = None,
    filter_text: str = "",
) -> list[Contact]:
    """Map grid rows to Contacts in original row order.

    Args:
        grid: decoded sheet rows
        name_column: index of the name cell
        number_column: index of the phone number cell
        filter_column: index of the filter cell, None or -1 disables filtering
        filter_text: comma separated match terms

    Returns:
        Contacts for every surviving, non-empty row (valid or not)
    """
    if not grid:
        return []

    terms = parse_filter_terms(filter_text)
    contacts: list[Contact] = []
    for index, row in enumerate(grid):
        if not isinstance(row, (list, tuple)):
            continue
        if not row_passes(row, filter_column, terms):
            continue

        raw_name = _cell(row, name_column)
        raw_number = _cell(row, number_column)
        if not raw_name and not raw_number:
            continue

        cleaned = digits_only(raw_number)
        contacts.append(
            Contact(
                id=f"row-{index}",
                original_name=raw_name,
                original_number=raw_number,
                cleaned_number=cleaned,
                is_valid=is_valid_contact(raw_name, cleaned),
            )
        )

    logger.debug(f"normalized {len(contacts)} contacts from {len(grid)} rows")
    return contacts


def contact_stats(contacts: list[Contact]) -> ContactStats:
    return ContactStats.from_contacts(contacts)
