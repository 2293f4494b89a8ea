from __future__ import annotations

from pathlib import Path

from xl2vcf.models.config_models import ConversionConfig
from xl2vcf.models.workbook import Workbook
from xl2vcf.services.pipeline import column_options, export_vcf, filter_values, process, select_sheet

GRID = [
    ["Name", "Phone", "City"],
    ["Alice", "9876543210", "Pune"],
    ["Bob", "9876543211", "Mumbai"],
    ["Carol", "9876543212", "Pune Office"],
]


def _workbook() -> Workbook:
    return Workbook(
        source=Path("contacts.xlsx"),
        sheet_names=["Clients", "Staff"],
        grids={
            "Clients": GRID,
            "Staff": [["Mobile", "Employee"], ["9998887776", "Eve"], ["9998887775", "Frank"]],
        },
    )


def test_process_applies_config():
    config = ConversionConfig(name_column=0, number_column=1, filter_column=2, filter_text="pune")
    contacts = process(GRID, config)
    assert [c.original_name for c in contacts] == ["Alice", "Carol"]


def test_process_is_deterministic():
    config = ConversionConfig(name_column=0, number_column=1, prefix="X ")
    first = process(GRID, config)
    second = process(GRID, config)
    assert first == second
    assert export_vcf(first, config.prefix) == export_vcf(second, config.prefix)


def test_select_sheet_redetects_and_resets_filter():
    wb = _workbook()
    clients = select_sheet(wb, "Clients", prefix="Biz - ")
    assert (clients.config.name_column, clients.config.number_column) == (0, 1)
    assert clients.config.prefix == "Biz - "

    staff = select_sheet(wb, "Staff")
    assert (staff.config.name_column, staff.config.number_column) == (1, 0)
    assert staff.config.filter_column is None
    assert staff.config.filter_text == ""


def test_select_unknown_sheet_yields_empty_grid():
    selection = select_sheet(_workbook(), "Missing")
    assert selection.grid == []
    assert (selection.config.name_column, selection.config.number_column) == (0, 1)
    assert process(selection.grid, selection.config) == []


def test_export_vcf_only_valid():
    contacts = process([["Alice", "9876543210"], ["Bob", "123"]], ConversionConfig())
    text = export_vcf(contacts, "")
    assert text.count("BEGIN:VCARD") == 1


def test_column_options_labels():
    grid = [["Name", "A very long header value here"], ["Alice", "9876543210", "extra"]]
    options = column_options(grid)
    assert options == [
        (0, "Col A: Name"),
        (1, "Col B: A very long header v..."),
        (2, "Col C"),
    ]


def test_column_options_beyond_26_columns():
    options = column_options([[None] * 28])
    assert options[25] == (25, "Col Z")
    assert options[26] == (26, "Col 27")


def test_filter_values_unique_sorted_skip_header():
    values = filter_values(GRID + [["Dave", "1", " Pune "], ["Eve", "2", None]], 2)
    assert values == ["Mumbai", "Pune", "Pune Office"]
    assert filter_values(GRID, None) == []


def test_conversion_config_rejects_negative_columns():
    import pytest

    with pytest.raises(ValueError):
        ConversionConfig(name_column=-1)
    with pytest.raises(ValueError):
        ConversionConfig(filter_column=-1)
