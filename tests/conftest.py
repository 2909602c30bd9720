"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import csv_tools...' and
'import actions...' work, and provides the small tables most tests start from.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from csv_tools.config.settings import reset_settings
from csv_tools.table.csv_table import CSVTable

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test starts from default settings, whatever the shell exports."""
    for name in ("CSV_TOOLS_DELIMITER", "CSV_TOOLS_ENCODING", "CSV_TOOLS_TRIM_ON_LOAD"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fake_columns():
    return ["a", "b", "c"]


@pytest.fixture
def fake_rows():
    return [
        ["1", "2", "3"],
        ["4", "5", "6"],
        ["7", "8", "9"],
    ]


@pytest.fixture
def table(fake_columns, fake_rows):
    """3x3 table with columns a, b, c and cells "1" through "9"."""
    return CSVTable.build(fake_columns, fake_rows)


@pytest.fixture
def langs_path():
    return FIXTURES_DIR / "langs.csv"
