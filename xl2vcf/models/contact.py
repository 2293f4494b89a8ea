from __future__ import annotations

from dataclasses import dataclass

"""Contact domain model.

A Contact is one normalized spreadsheet row, ready for export. Instances are
created fresh on every pipeline run and never mutated afterwards.
"""

__all__ = [
    "Contact",
    "ContactStats",
    "MIN_NUMBER_DIGITS",
]

# 有効な電話番号の最小桁数
MIN_NUMBER_DIGITS = 10


@dataclass(frozen=True)
class Contact:
    """Normalized, validated record derived from one grid row.

    ``id`` is ``"row-<index>"`` where index is the zero-based position in the
    source grid, so ids are not contiguous when rows are filtered or empty.
    """
    id: str
    original_name: str  # trimmed name cell
    original_number: str  # trimmed number cell, as typed
    cleaned_number: str  # digits of original_number, order preserved
    is_valid: bool

    @property
    def row_index(self) -> int:
        return int(self.id.rsplit("-", 1)[1])


@dataclass(frozen=True)
class ContactStats:
    """Counters shown next to a preview (total / valid / invalid)."""
    total: int
    valid: int
    invalid: int

    @classmethod
    def from_contacts(cls, contacts: list[Contact]) -> ContactStats:
        valid = sum(1 for c in contacts if c.is_valid)
        return cls(total=len(contacts), valid=valid, invalid=len(contacts) - valid)
