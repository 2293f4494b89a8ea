from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..models.config_models import ColumnGuess
from ..models.workbook import RawGrid
from .classifier import is_name_like, is_phone_like

"""Column auto-detection.

Samples the first rows of a grid, scores every column with the cell
classifier and picks the best phone column, then the best name column among
the remaining ones.

Ties go to the lowest column index: indices are scanned in ascending order
and a later column only wins with a strictly higher ratio.
"""

__all__ = [
    "ColumnStats",
    "collect_column_stats",
    "detect_columns",
    "SAMPLE_ROWS",
    "MIN_RATIO",
    "DEFAULT_NAME_INDEX",
    "DEFAULT_NUMBER_INDEX",
]

logger = logging.getLogger(__name__)

SAMPLE_ROWS = 50
MIN_RATIO = 0.4
DEFAULT_NAME_INDEX = 0
DEFAULT_NUMBER_INDEX = 1


@dataclass
class ColumnStats:
    count: int = 0
    phone_score: int = 0
    name_score: int = 0

    @property
    def phone_ratio(self) -> float:
        return self.phone_score / self.count if self.count > 0 else 0.0

    @property
    def name_ratio(self) -> float:
        return self.name_score / self.count if self.count > 0 else 0.0


def collect_column_stats(grid: RawGrid, sample_rows: int = SAMPLE_ROWS) -> dict[int, ColumnStats]:
    """Score every column index seen in the first ``sample_rows`` rows."""
    stats: dict[int, ColumnStats] = {}
    for row in grid[:sample_rows]:
        if not isinstance(row, (list, tuple)):
            continue
        for idx, cell in enumerate(row):
            # 欠損セル (None) は集計しない
            if cell is None:
                continue
            col = stats.setdefault(idx, ColumnStats())
            col.count += 1
            # phone 判定が優先 (同一セルで name と二重計上しない)
            if is_phone_like(cell):
                col.phone_score += 1
            elif is_name_like(cell):
                col.name_score += 1
    return stats


def _best_index(
    stats: dict[int, ColumnStats],
    ratio_of: Callable[[ColumnStats], float],
    exclude: int | None = None,
) -> int | None:
    best_idx: int | None = None
    best_ratio = 0.0
    for idx in sorted(stats):
        if idx == exclude:
            continue
        ratio = ratio_of(stats[idx])
        if ratio > MIN_RATIO and ratio > best_ratio:
            best_ratio = ratio
            best_idx = idx
    return best_idx


def detect_columns(grid: RawGrid) -> ColumnGuess:
    """Guess which columns hold names and phone numbers.

    Returns ``ColumnGuess(name_index=0, number_index=1)`` for an empty grid.
    The two indices are always distinct.
    """
    if not grid:
        return ColumnGuess(name_index=DEFAULT_NAME_INDEX, number_index=DEFAULT_NUMBER_INDEX)

    stats = collect_column_stats(grid)

    phone_idx = _best_index(stats, lambda s: s.phone_ratio)
    name_idx = _best_index(stats, lambda s: s.name_ratio, exclude=phone_idx)

    if phone_idx is None:
        phone_idx = DEFAULT_NUMBER_INDEX
    if name_idx is None:
        name_idx = DEFAULT_NAME_INDEX

    if name_idx == phone_idx:
        name_idx = 1 if phone_idx == 0 else 0

    logger.debug(f"detected columns name={name_idx} number={phone_idx} (sampled {min(len(grid), SAMPLE_ROWS)} rows)")
    return ColumnGuess(name_index=name_idx, number_index=phone_idx)
