from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

A single bar counts converted files and carries running contact totals in
its postfix. Per-sheet status lines go through ``tqdm.write`` so they do not
tear the bar. Nothing is printed when stdout is not a TTY (CI, pipes, tests).
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
    "SheetProgressIndicator",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """File-level progress bar with running ok/failed/valid counters."""

    def __init__(self, total_files: int, *, description: str = "Converting") -> None:
        self.total_files = total_files
        self.description = description
        self.ok_files = 0
        self.failed_files = 0
        self.valid_contacts = 0

        self.enabled = is_tty_enabled() and total_files > 0
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="file",
                leave=True,
                dynamic_ncols=True,
                ascii=True,
            )

    @property
    def done_files(self) -> int:
        return self.ok_files + self.failed_files

    def start_file(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} {file_path.name}")

    def finish_file(self, success: bool = True, valid_contacts: int = 0) -> None:
        if success:
            self.ok_files += 1
        else:
            self.failed_files += 1
        self.valid_contacts += valid_contacts
        if self.pbar is not None:
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(ok=self.ok_files, failed=self.failed_files, valid=self.valid_contacts)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class SheetProgressIndicator:
    """One status line per sheet: exported contact count or skipped."""

    def __init__(self, file_name: str, total_sheets: int) -> None:
        self.file_name = file_name
        self.total_sheets = total_sheets
        self.current_sheet = 0
        self.sheet_name = ""
        self.enabled = is_tty_enabled()

    def start_sheet(self, sheet_name: str) -> None:
        self.current_sheet += 1
        self.sheet_name = sheet_name

    def finish_sheet(self, valid_contacts: int, output_path: Path | None = None) -> None:
        if not self.enabled:
            return
        head = f"  [{self.current_sheet}/{self.total_sheets}] {self.file_name}:{self.sheet_name}"
        if output_path is None:
            tqdm.write(f"{head} skipped (no valid contacts)")
        else:
            tqdm.write(f"{head} {valid_contacts} contacts -> {output_path.name}")
