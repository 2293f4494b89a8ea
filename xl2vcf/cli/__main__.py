from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from xl2vcf.config.loader import ConfigError, load_optional_config
from xl2vcf.excel.reader import DecodeError, read_workbook
from xl2vcf.logging.init import log_summary, setup_logging
from xl2vcf.models.config_models import AppConfig, RunOptions
from xl2vcf.services.normalizer import contact_stats
from xl2vcf.services.orchestrator import ProcessingError, build_sheet_config, convert_all, scan_inputs
from xl2vcf.services.pipeline import column_options, filter_values, process, select_sheet
from xl2vcf.services.summary import render_summary_line

"""CLI entrypoint.

    xl2vcf contacts.xlsx [more files or directories] [options]

Flow:
- Load .env (API key for prefix suggestions) and the optional YAML config
- Expand inputs, convert each file, print a SUMMARY line
- ``--inspect-data`` prints detected columns and a few contacts instead
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_CONTACTS = 5


def _column_index(value: str) -> int:
    try:
        idx = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid column index: {value!r}") from None
    if idx < 0:
        raise argparse.ArgumentTypeError(f"column index must be >= 0: {idx}")
    return idx


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; a broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="xl2vcf", description="Excel/CSV contact list -> VCF converter")
    p.add_argument("paths", nargs="+", type=Path, help="Spreadsheet files or directories")
    sheet = p.add_mutually_exclusive_group()
    sheet.add_argument("--sheet", help="Sheet to convert (default: first sheet)")
    sheet.add_argument("--all-sheets", action="store_true", default=None, help="Convert every sheet")
    p.add_argument("--name-col", type=_column_index, help="0-based name column (default: auto-detect)")
    p.add_argument("--number-col", type=_column_index, help="0-based phone column (default: auto-detect)")
    p.add_argument("--filter-col", type=_column_index, help="0-based column to filter on")
    p.add_argument("--filter", dest="filter_text", default="", help="Comma separated terms matched in --filter-col")
    p.add_argument("--prefix", help="Text prepended to every exported name")
    p.add_argument("--suggest-prefix", action="store_true", help="Ask Gemini for a prefix when --prefix is not given")
    p.add_argument("--escape", action="store_true", default=None, help="Escape ; , and \\ in vCard names")
    p.add_argument("--output-dir", help="Directory for .vcf files (default: next to each source)")
    p.add_argument("--config", type=Path, help="YAML config (default: config/xl2vcf.yml if present)")
    p.add_argument("--error-log", action="store_true", default=None, help="Write rejected rows to logs/errors-*.log")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheets, detected columns & sample contacts then exit")
    args = p.parse_args(argv)
    if args.filter_text and args.filter_col is None:
        p.error("--filter requires --filter-col")
    return args


def _run_options(args: argparse.Namespace, cfg: AppConfig) -> RunOptions:
    """Merge config file values with CLI flags (flags win)."""
    prefix = args.prefix if args.prefix is not None else (cfg.prefix or None)
    if args.sheet is not None:
        # --sheet は設定ファイルの all_sheets より優先
        all_sheets = False
    elif args.all_sheets is not None:
        all_sheets = args.all_sheets
    else:
        all_sheets = cfg.all_sheets
    return RunOptions(
        sheet=args.sheet,
        all_sheets=all_sheets,
        name_column=args.name_col,
        number_column=args.number_col,
        filter_column=args.filter_col,
        filter_text=args.filter_text,
        prefix=prefix,
        suggest_prefix=args.suggest_prefix,
        escape_values=args.escape if args.escape is not None else cfg.escape_values,
        output_directory=args.output_dir if args.output_dir is not None else cfg.output_directory,
        error_log=args.error_log if args.error_log is not None else cfg.error_log,
        gemini_model=cfg.gemini_model,
    )


def _inspect_data(paths: list[Path], options: RunOptions) -> int:
    try:
        files = scan_inputs(paths)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no spreadsheet files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            workbook = read_workbook(f)
        except DecodeError as e:
            print(f"  read_error: {e}")
            continue
        for sname in workbook.sheet_names:
            selection = select_sheet(workbook, sname)
            config = build_sheet_config(selection.config, options)
            contacts = process(selection.grid, config)
            stats = contact_stats(contacts)
            print(f"  SHEET: {sname} rows={len(selection.grid)}")
            print(f"    columns={[label for _, label in column_options(selection.grid)]}")
            print(f"    detected name_col={selection.config.name_column} number_col={selection.config.number_column}")
            if config.filter_column is not None:
                print(f"    filter_values={filter_values(selection.grid, config.filter_column)[:20]}")
            print(f"    contacts total={stats.total} valid={stats.valid} invalid={stats.invalid}")
            for c in contacts[:INSPECT_SAMPLE_CONTACTS]:
                mark = "ok" if c.is_valid else "invalid"
                print(f"    {c.id}: {c.original_name!r} {c.cleaned_number} [{mark}]")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # NOTE: [] を渡されたときに sys.argv[1:] が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))

    try:
        cfg = load_optional_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    options = _run_options(args, cfg)

    if args.inspect_data:
        return _inspect_data(args.paths, options)

    try:
        result = convert_all(args.paths, options)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
