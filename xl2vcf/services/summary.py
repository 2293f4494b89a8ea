from __future__ import annotations

from ..models.processing_result import ConversionResult

"""SUMMARY line rendering for a conversion run.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} sheets={sheets}
contacts={contacts} valid={valid} invalid={invalid} elapsed_sec={elapsed}
"""

__all__ = [
    "render_summary_line",
    "format_seconds",
]


def format_seconds(value: float) -> str:
    """Render seconds without scientific notation or a needless ``.0``."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return str(round(value, 3))


def render_summary_line(total_files: int, result: ConversionResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ConversionResult(
        ...     success_files=1, failed_files=0, converted_sheets=1,
        ...     total_contacts=12, valid_contacts=10, invalid_contacts=2,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 sheets=1 contacts=12 valid=10 invalid=2 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"sheets={result.converted_sheets} "
        f"contacts={result.total_contacts} "
        f"valid={result.valid_contacts} "
        f"invalid={result.invalid_contacts} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )
