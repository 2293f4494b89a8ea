from __future__ import annotations

from dataclasses import dataclass, replace

"""Config dataclasses for the spreadsheet -> VCF converter.

``ConversionConfig`` is the per-sheet mapping a user adjusts (columns,
filter, prefix). ``AppConfig`` is the file/CLI level configuration produced
by xl2vcf.config.loader.
"""

__all__ = [
    "ColumnGuess",
    "ConversionConfig",
    "AppConfig",
    "RunOptions",
    "DEFAULT_GEMINI_MODEL",
]

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


@dataclass(frozen=True)
class ColumnGuess:
    """Result of column auto-detection."""
    name_index: int
    number_index: int


@dataclass(frozen=True)
class ConversionConfig:
    """Column mapping and export options for one sheet.

    ``filter_column`` is None when filtering is disabled.
    """
    name_column: int = 0
    number_column: int = 1
    filter_column: int | None = None
    filter_text: str = ""
    prefix: str = ""

    def __post_init__(self) -> None:
        if self.name_column < 0 or self.number_column < 0:
            raise ValueError("column indices must be >= 0")
        if self.filter_column is not None and self.filter_column < 0:
            raise ValueError("filter_column must be >= 0 or None")

    @classmethod
    def from_guess(cls, guess: ColumnGuess, prefix: str = "") -> ConversionConfig:
        return cls(name_column=guess.name_index, number_column=guess.number_index, prefix=prefix)

    def with_changes(self, **changes: object) -> ConversionConfig:
        """Return a copy with the given fields replaced (config is never mutated)."""
        return replace(self, **changes)  # type: ignore[arg-type]


@dataclass(frozen=True)
class AppConfig:
    """Run-level settings (YAML file, overridden by CLI flags)."""
    output_directory: str | None = None  # None -> next to the source file
    prefix: str = ""
    escape_values: bool = False
    error_log: bool = False
    all_sheets: bool = False
    gemini_model: str = DEFAULT_GEMINI_MODEL


@dataclass(frozen=True)
class RunOptions:
    """Effective options for one CLI run (config file merged with flags).

    Column overrides are optional; detected columns are used where None.
    ``prefix=None`` means "not given", which allows an AI suggestion.
    """
    sheet: str | None = None
    all_sheets: bool = False
    name_column: int | None = None
    number_column: int | None = None
    filter_column: int | None = None
    filter_text: str = ""
    prefix: str | None = None
    suggest_prefix: bool = False
    escape_values: bool = False
    output_directory: str | None = None
    error_log: bool = False
    gemini_model: str = DEFAULT_GEMINI_MODEL
