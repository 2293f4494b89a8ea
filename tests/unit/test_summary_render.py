from __future__ import annotations

import re
from datetime import datetime, timezone

from xl2vcf.models.processing_result import ConversionResult
from xl2vcf.services.summary import format_seconds, render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"sheets=([0-9]+)\s+contacts=([0-9]+)\s+valid=([0-9]+)\s+invalid=([0-9]+)\s+"
    r"elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def _result(**overrides) -> ConversionResult:
    start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
    values = dict(
        success_files=2, failed_files=1, converted_sheets=3,
        total_contacts=120, valid_contacts=100, invalid_contacts=20,
        start_time=start, end_time=end, elapsed_seconds=2.0,
    )
    values.update(overrides)
    return ConversionResult(**values)


def test_render_summary_line_matches_format():
    line = render_summary_line(3, _result())
    match = SUMMARY_PATTERN.match(line)
    assert match, line
    assert match.group(3) == "2"
    assert match.group(4) == "1"
    assert match.group(5) == "3"
    assert match.group(7) == "100"
    assert line.endswith("elapsed_sec=2")


def test_render_summary_line_zero_files():
    line = render_summary_line(0, _result(
        success_files=0, failed_files=0, converted_sheets=0,
        total_contacts=0, valid_contacts=0, invalid_contacts=0, elapsed_seconds=0.0,
    ))
    assert line == "SUMMARY files=0/0 success=0 failed=0 sheets=0 contacts=0 valid=0 invalid=0 elapsed_sec=0"


def test_format_seconds_small_values_avoid_scientific_notation():
    assert format_seconds(0.000123) == "0.000123"
    assert "e" not in format_seconds(0.0000012)
    assert format_seconds(1.23456) == "1.235"
