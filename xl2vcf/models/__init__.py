"""Domain models for the spreadsheet -> VCF converter."""

from .config_models import AppConfig, ColumnGuess, ConversionConfig
from .contact import Contact, ContactStats
from .processing_result import ConversionResult, FileStat, SheetStat
from .workbook import RawGrid, SheetSelection, Workbook

__all__ = [
    # Configuration models
    "AppConfig",
    "ColumnGuess",
    "ConversionConfig",
    # Processing models
    "Contact",
    "ContactStats",
    "RawGrid",
    "SheetSelection",
    "Workbook",
    # Results
    "ConversionResult",
    "FileStat",
    "SheetStat",
]
