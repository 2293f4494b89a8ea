from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..excel.reader import SUPPORTED_SUFFIXES, DecodeError, read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ConversionConfig, RunOptions
from ..models.contact import Contact
from ..models.error_record import FILE_LEVEL_ROW, ErrorRecord
from ..models.processing_result import ConversionResult, FileStat, SheetStat
from ..models.workbook import Workbook
from .normalizer import contact_stats
from .pipeline import export_vcf, process, select_sheet
from .prefix_suggest import sample_names, suggest_prefix
from .progress import ProgressTracker, SheetProgressIndicator
from .vcf_encoder import output_file_name, write_vcf

"""Batch conversion over input files and sheets.

For every input file: decode, pick the sheet(s), detect columns, apply the
run's overrides, normalize, and write one VCF per sheet that has at least one
valid contact. A file that cannot be decoded is marked failed and the run
continues with the next file.
"""

__all__ = [
    "ProcessingError",
    "scan_inputs",
    "convert_all",
    "convert_workbook",
    "build_sheet_config",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that stops the whole run (bad input paths)."""


class _FileFailure(Exception):
    def __init__(self, error_type: str, message: str) -> None:
        super().__init__(message)
        self.error_type = error_type


def scan_inputs(paths: list[Path]) -> list[Path]:
    """Expand directories (non-recursive) into supported spreadsheet files.

    Explicit file paths are kept as given, in order.

    Raises:
        ProcessingError: if a path does not exist or a directory cannot be read
    """
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            raise ProcessingError(f"path not found: {path}")
        if path.is_dir():
            try:
                found = sorted(
                    p for p in path.iterdir()
                    if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
                )
            except OSError as e:
                raise ProcessingError(f"error reading directory {path}: {e}") from e
            files.extend(found)
        else:
            files.append(path)
    return files


def build_sheet_config(detected: ConversionConfig, options: RunOptions) -> ConversionConfig:
    """Apply explicit column/filter overrides on top of detected columns."""
    changes: dict[str, object] = {
        "filter_column": options.filter_column,
        "filter_text": options.filter_text,
    }
    if options.name_column is not None:
        changes["name_column"] = options.name_column
    if options.number_column is not None:
        changes["number_column"] = options.number_column
    if options.prefix is not None:
        changes["prefix"] = options.prefix
    return detected.with_changes(**changes)


class _PrefixResolver:
    """Run-wide export prefix; the AI suggestion is requested at most once."""

    def __init__(self, options: RunOptions) -> None:
        self.options = options
        self.requested = False
        self.suggestion = ""

    def resolve(self, config: ConversionConfig, contacts: list[Contact]) -> str:
        if self.options.prefix is not None or not self.options.suggest_prefix:
            return config.prefix
        if not self.requested:
            names = sample_names(contacts)
            if not names:
                logger.warning("prefix suggestion skipped: no valid names to analyze")
                return config.prefix
            self.requested = True
            self.suggestion = suggest_prefix(names, model_name=self.options.gemini_model)
            if self.suggestion:
                logger.info(f"suggested prefix: '{self.suggestion}'")
        return self.suggestion or config.prefix


def _target_sheets(workbook: Workbook, options: RunOptions) -> list[str]:
    if options.all_sheets:
        return list(workbook.sheet_names)
    if options.sheet is None:
        return [workbook.sheet_names[0]]
    if options.sheet not in workbook.sheet_names:
        raise _FileFailure(
            "SHEET_NOT_FOUND",
            f"sheet '{options.sheet}' not in {workbook.sheet_names}",
        )
    return [options.sheet]


def _record_invalid(error_log: ErrorLogBuffer | None, file_name: str, sheet: str, contacts: list[Contact]) -> None:
    if error_log is None:
        return
    for c in contacts:
        if c.is_valid:
            continue
        if not c.original_name:
            reason = "missing name"
        else:
            reason = f"number '{c.original_number}' has {len(c.cleaned_number)} digits (need 10)"
        error_log.append(ErrorRecord.create(file_name, sheet, c.row_index, "INVALID_CONTACT", reason))


def convert_workbook(
    workbook: Workbook,
    options: RunOptions,
    error_log: ErrorLogBuffer | None = None,
    prefixes: _PrefixResolver | None = None,
) -> list[SheetStat]:
    """Convert the selected sheet(s) of a decoded workbook to VCF files.

    ``prefixes`` is shared across a run so a suggested prefix is reused.
    """
    if prefixes is None:
        prefixes = _PrefixResolver(options)
    sheets = _target_sheets(workbook, options)
    output_dir = Path(options.output_directory) if options.output_directory else workbook.source.parent
    indicator = SheetProgressIndicator(file_name=workbook.source.name, total_sheets=len(sheets))

    stats: list[SheetStat] = []
    for sheet_name in sheets:
        indicator.start_sheet(sheet_name)
        selection = select_sheet(workbook, sheet_name)
        config = build_sheet_config(selection.config, options)
        contacts = process(selection.grid, config)
        counts = contact_stats(contacts)
        _record_invalid(error_log, workbook.source.name, sheet_name, contacts)

        output_path: Path | None = None
        if counts.valid == 0:
            logger.warning(f"{workbook.source.name}[{sheet_name}]: no valid contacts, nothing exported")
        else:
            prefix = prefixes.resolve(config, contacts)
            text = export_vcf(contacts, prefix, escape=options.escape_values)
            output_path = write_vcf(text, output_dir / output_file_name(workbook.source, sheet_name))
            logger.info(
                f"{workbook.source.name}[{sheet_name}]: name_col={config.name_column} "
                f"number_col={config.number_column} valid={counts.valid} -> {output_path}"
            )

        indicator.finish_sheet(counts.valid, output_path)
        stats.append(
            SheetStat(
                sheet_name=sheet_name,
                total_contacts=counts.total,
                valid_contacts=counts.valid,
                invalid_contacts=counts.invalid,
                output_path=str(output_path) if output_path is not None else None,
            )
        )
    return stats


def _convert_file(
    path: Path,
    options: RunOptions,
    error_log: ErrorLogBuffer | None,
    prefixes: _PrefixResolver,
) -> FileStat:
    start = datetime.now(UTC)
    try:
        workbook = read_workbook(path)
        sheets = convert_workbook(workbook, options, error_log, prefixes)
    except DecodeError as e:
        return _failed(path, start, "DECODE_ERROR", str(e), error_log)
    except _FileFailure as e:
        return _failed(path, start, e.error_type, str(e), error_log)
    except OSError as e:
        return _failed(path, start, "WRITE_ERROR", str(e), error_log)

    elapsed = (datetime.now(UTC) - start).total_seconds()
    return FileStat(file_name=path.name, status="success", sheets=sheets, elapsed_seconds=elapsed)


def _failed(
    path: Path,
    start: datetime,
    error_type: str,
    message: str,
    error_log: ErrorLogBuffer | None,
) -> FileStat:
    logger.error(f"{path.name}: {message}")
    if error_log is not None:
        error_log.append(ErrorRecord.create(path.name, "", FILE_LEVEL_ROW, error_type, message))
    elapsed = (datetime.now(UTC) - start).total_seconds()
    return FileStat(file_name=path.name, status="failed", sheets=[], elapsed_seconds=elapsed, error=message)


def convert_all(paths: list[Path], options: RunOptions) -> ConversionResult:
    """Convert every input file and aggregate the run metrics.

    Raises:
        ProcessingError: for fatal input errors (see :func:`scan_inputs`)
    """
    start_time = datetime.now(UTC)
    files = scan_inputs(paths)
    error_log = ErrorLogBuffer() if options.error_log else None
    prefixes = _PrefixResolver(options)

    file_stats: list[FileStat] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            stat = _convert_file(path, options, error_log, prefixes)
            file_stats.append(stat)
            progress.finish_file(success=(stat.status == "success"), valid_contacts=stat.valid_contacts)

    log_path: Path | None = None
    if error_log is not None:
        try:
            log_path = error_log.flush()
        except OSError as e:
            logger.warning(f"failed to write error log: {e}")
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    sheets = [s for f in file_stats for s in f.sheets]
    return ConversionResult(
        success_files=sum(1 for f in file_stats if f.status == "success"),
        failed_files=sum(1 for f in file_stats if f.status == "failed"),
        converted_sheets=len(sheets),
        total_contacts=sum(s.total_contacts for s in sheets),
        valid_contacts=sum(s.valid_contacts for s in sheets),
        invalid_contacts=sum(s.invalid_contacts for s in sheets),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
        error_log_path=str(log_path) if log_path is not None else None,
    )
