from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .config_models import ConversionConfig

"""Workbook and sheet selection models.

A RawGrid is the decoded content of one sheet: rows of heterogeneous scalar
cells, possibly jagged. Grids are replaced wholesale on a sheet switch.
"""

__all__ = [
    "RawCell",
    "RawRow",
    "RawGrid",
    "Workbook",
    "SheetSelection",
]

RawCell = Union[str, int, float, bool, None]
RawRow = list[RawCell]
RawGrid = list[RawRow]


@dataclass(frozen=True)
class Workbook:
    """Decoded spreadsheet: ordered sheet names and one grid per sheet."""
    source: Path
    sheet_names: list[str]
    grids: dict[str, RawGrid] = field(default_factory=dict)

    @property
    def base_name(self) -> str:
        """Source file name without its extension."""
        return self.source.stem

    def grid(self, sheet_name: str) -> RawGrid:
        """Grid for a sheet; unknown sheet names yield an empty grid."""
        return self.grids.get(sheet_name, [])


@dataclass(frozen=True)
class SheetSelection:
    """The active sheet with its freshly detected conversion config."""
    sheet_name: str
    grid: RawGrid
    config: ConversionConfig
