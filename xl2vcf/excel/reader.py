from __future__ import annotations

import csv
import math
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.workbook import RawCell, RawGrid, RawRow, Workbook

"""Spreadsheet decoding: file -> Workbook of raw grids.

Sheets are read without a header row; every physical row becomes a list of
scalar cells. Empty cells turn into None, trailing empty cells are dropped
(rows may be jagged) and integral floats come back as int so that phone
numbers stored as numbers keep their digits.

CSV files decode to a single sheet named ``Sheet1``.
"""

__all__ = [
    "DecodeError",
    "read_workbook",
    "frame_to_grid",
    "SUPPORTED_SUFFIXES",
    "CSV_SHEET_NAME",
]

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES | {".csv"}
CSV_SHEET_NAME = "Sheet1"


class DecodeError(Exception):
    """Raised when a file is not a readable spreadsheet or has no sheets."""


def _to_cell(value: Any) -> RawCell:
    if value is None:
        return None
    # numpy scalar -> python scalar
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        try:
            value = value.item()
        except (ValueError, TypeError):
            pass
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (str, int, bool)):
        return value
    if pd.isna(value):
        return None
    return str(value)


def _trim_trailing(row: RawRow) -> RawRow:
    end = len(row)
    while end > 0 and (row[end - 1] is None or row[end - 1] == ""):
        end -= 1
    return row[:end]


def frame_to_grid(df: pd.DataFrame) -> RawGrid:
    """Convert a header-less DataFrame into a RawGrid (blank rows kept as [])."""
    grid: RawGrid = []
    for raw in df.itertuples(index=False, name=None):
        grid.append(_trim_trailing([_to_cell(v) for v in raw]))
    # 末尾の空行は除去 (途中の空行は行位置を保つため残す)
    while grid and not grid[-1]:
        grid.pop()
    return grid


def _read_csv(path: Path) -> dict[str, RawGrid]:
    # csv.reader keeps jagged rows intact (pandas needs a fixed field count)
    try:
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            rows = [[cell if cell != "" else None for cell in row] for row in csv.reader(f)]
    except (csv.Error, UnicodeDecodeError, OSError) as e:
        raise DecodeError(f"cannot read csv '{path.name}': {e}") from e
    grid: RawGrid = [_trim_trailing(row) for row in rows]
    while grid and not grid[-1]:
        grid.pop()
    return {CSV_SHEET_NAME: grid}


def _read_excel(path: Path, target_sheets: Iterable[str] | None) -> dict[str, RawGrid]:
    try:
        xls = pd.ExcelFile(path)
    except Exception as e:  # openpyxl/xlrd raise a wide variety of errors on bad input
        raise DecodeError(f"cannot open workbook '{path.name}': {e}") from e

    wanted = set(target_sheets) if target_sheets is not None else None
    grids: dict[str, RawGrid] = {}
    with xls:
        for name in xls.sheet_names:
            sheet = str(name)
            if wanted is not None and sheet not in wanted:
                continue
            try:
                df = xls.parse(name, header=None, dtype=object, keep_default_na=False, na_values=[""])
            except Exception as e:
                raise DecodeError(f"cannot read sheet '{sheet}' of '{path.name}': {e}") from e
            grids[sheet] = frame_to_grid(df)
    return grids


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> Workbook:
    """Decode a spreadsheet file.

    Parameters
    ----------
    path: .xlsx / .xlsm / .xls / .csv file
    target_sheets: restrict decoding to these sheet names (None = all)

    Raises
    ------
    DecodeError: missing file, unsupported extension, unreadable content or
        a workbook with zero sheets
    """
    path = Path(path)
    if not path.is_file():
        raise DecodeError(f"file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DecodeError(f"unsupported file type '{suffix or path.name}'")

    if suffix == ".csv":
        grids = _read_csv(path)
    else:
        grids = _read_excel(path, target_sheets)

    if not grids:
        raise DecodeError(f"no sheets found in '{path.name}'")
    return Workbook(source=path, sheet_names=list(grids.keys()), grids=grids)
