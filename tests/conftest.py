# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from xl2vcf.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "out").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    # handler は sys.stdout を保持するので capsys ごとに作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
prefix: ""
escape_values: false
error_log: false
all_sheets: false
gemini_model: gemini-1.5-flash
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "xl2vcf.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel(directory: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
    p = directory / name
    with pd.ExcelWriter(p) as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return p


@pytest.fixture()
def contacts_sheet() -> list[list[object]]:
    return [
        ["Name", "Phone", "City"],
        ["Alice", "98765 43210", "Pune"],
        ["Bob", "+91 12345-67890", "Mumbai"],
        ["Carol", "12345", "Pune Office"],
        [None, None, "Delhi"],
        ["Dave", "022-2345-6789", "HR Pune"],
    ]


@pytest.fixture()
def contacts_xlsx(temp_workdir: Path, contacts_sheet) -> Path:
    return make_excel(
        temp_workdir / "data",
        "contacts.xlsx",
        {
            "Clients": contacts_sheet,
            "Staff": [
                ["Mobile", "Employee"],
                ["9998887776", "Eve"],
                ["9998887775", "Frank"],
            ],
        },
    )
