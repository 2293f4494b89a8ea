from __future__ import annotations
from pathlib import Path

import pytest

from conftest import make_excel
from xl2vcf.cli import main as cli_main
from xl2vcf.cli.__main__ import _parse_args, _run_options
from xl2vcf.models.config_models import AppConfig


def test_cli_no_files_success(temp_workdir: Path, capsys):
    code = cli_main([str(temp_workdir / "data")])
    out = capsys.readouterr().out
    assert code == 0
    assert 'SUMMARY files=0/0 success=0 failed=0 sheets=0 contacts=0' in out


def test_cli_path_missing(temp_workdir: Path, capsys):
    code = cli_main([str(temp_workdir / "missing_dir")])
    out = capsys.readouterr().out
    assert code == 1
    assert 'ERROR processing: path not found:' in out


def test_cli_rejects_negative_column(temp_workdir: Path):
    with pytest.raises(SystemExit):
        cli_main(["x.xlsx", "--name-col", "-1"])


def test_cli_sheet_and_all_sheets_are_exclusive():
    with pytest.raises(SystemExit):
        _parse_args(["x.xlsx", "--sheet", "A", "--all-sheets"])


def test_run_options_flags_override_config():
    cfg = AppConfig(output_directory="cfg_out", prefix="Cfg - ", escape_values=True, all_sheets=True)
    args = _parse_args(["x.xlsx", "--prefix", "Cli - ", "--output-dir", "cli_out"])
    options = _run_options(args, cfg)
    assert options.prefix == "Cli - "
    assert options.output_directory == "cli_out"
    # not given on the command line -> config value
    assert options.escape_values is True
    assert options.all_sheets is True
    assert options.filter_column is None


def test_run_options_empty_config_prefix_means_unset():
    options = _run_options(_parse_args(["x.xlsx", "--suggest-prefix"]), AppConfig())
    assert options.prefix is None
    assert options.suggest_prefix is True


def test_run_options_filter_flags():
    args = _parse_args(["x.xlsx", "--filter-col", "2", "--filter", "Pune, HR", "--number-col", "3"])
    options = _run_options(args, AppConfig())
    assert options.filter_column == 2
    assert options.filter_text == "Pune, HR"
    assert options.number_column == 3
    assert options.name_column is None


def test_run_options_sheet_flag_beats_config_all_sheets():
    options = _run_options(_parse_args(["x.xlsx", "--sheet", "B"]), AppConfig(all_sheets=True))
    assert options.sheet == "B"
    assert options.all_sheets is False


def test_cli_sheet_flag_with_config_all_sheets_exports_only_that_sheet(temp_workdir: Path, capsys):
    book = make_excel(
        temp_workdir / "data",
        "book.xlsx",
        {"A": [["Ann", "9876543210"]], "B": [["Ben", "9876543211"]]},
    )
    cfg = temp_workdir / "config" / "c.yml"
    cfg.write_text("output_directory: ./out\nall_sheets: true\n", encoding="utf-8")

    code = cli_main([str(book), "--sheet", "B", "--config", str(cfg)])

    assert code == 0
    assert sorted(p.name for p in (temp_workdir / "out").glob("*.vcf")) == ["book_B_converted.vcf"]
    assert "SUMMARY files=1/1 success=1 failed=0 sheets=1" in capsys.readouterr().out


def test_cli_filter_without_filter_col_is_rejected(capsys):
    with pytest.raises(SystemExit) as exc:
        _parse_args(["x.xlsx", "--filter", "pune"])
    assert exc.value.code == 2
    assert "--filter requires --filter-col" in capsys.readouterr().err
