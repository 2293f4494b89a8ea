from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for batch conversion runs.

Aggregated per-file and per-run counters feeding the SUMMARY line.
"""

__all__ = [
    "SheetStat",
    "FileStat",
    "ConversionResult",
]


@dataclass(frozen=True)
class SheetStat:
    """Outcome of converting one sheet."""
    sheet_name: str
    total_contacts: int
    valid_contacts: int
    invalid_contacts: int
    output_path: str | None = None  # None when nothing was exported


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    status: str  # success/failed
    sheets: list[SheetStat]
    elapsed_seconds: float
    error: str | None = None

    @property
    def valid_contacts(self) -> int:
        return sum(s.valid_contacts for s in self.sheets)


@dataclass(frozen=True)
class ConversionResult:
    """Aggregated results for one CLI run."""
    success_files: int
    failed_files: int
    converted_sheets: int
    total_contacts: int
    valid_contacts: int
    invalid_contacts: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
    error_log_path: str | None = None
