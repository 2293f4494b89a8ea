from __future__ import annotations

import re
from pathlib import Path

from xl2vcf.cli import main as cli_main

"""SUMMARY 行フォーマット契約テスト"""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"sheets=([0-9]+)\s+contacts=([0-9]+)\s+valid=([0-9]+)\s+invalid=([0-9]+)\s+"
    r"elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = "SUMMARY files=1/1 success=1 failed=0 sheets=2 contacts=8 valid=5 invalid=3 elapsed_sec=0.84"
    assert SUMMARY_PATTERN.match(line), "SUMMARY line should match contract regex"


def test_summary_line_from_cli_matches_contract(contacts_xlsx: Path, write_config, capsys):
    cli_main([str(contacts_xlsx), "--all-sheets"])
    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("SUMMARY")]
    assert len(lines) == 1
    m = SUMMARY_PATTERN.match(lines[0])
    assert m, lines[0]
    # Clients: 5 rows (3 valid), Staff: 3 rows (2 valid)
    assert m.group(5) == "2"
    assert (m.group(6), m.group(7), m.group(8)) == ("8", "5", "3")


def test_summary_is_last_line(contacts_xlsx: Path, write_config, capsys):
    cli_main([str(contacts_xlsx)])
    out = capsys.readouterr().out.strip().splitlines()
    assert out[-1].startswith("SUMMARY files=1/1")
