"""
csv_tools: an in-memory table engine for delimited text.

Parses CSV lines (with double-quoted fields and backslash escapes) into a
CSVTable, edits it while keeping every row as wide as the header, and writes
it back out.

Usage:
    from csv_tools import load, read_csv_file

    table = load(["name,age", 'Thomas,20', '"Smith, J",33'])
    table.add_column("city")
    print(table.serialize())
"""

__version__ = "0.1.0"

from csv_tools.data.io import (
    read_csv_file,
    table_from_dataframe,
    table_to_dataframe,
    write_csv_file,
)
from csv_tools.data.schemas import (
    ColumnNotFoundError,
    CSVToolsError,
    DuplicateColumnError,
    IndexOutOfRangeError,
    MalformedLineError,
    ShapeMismatchError,
)
from csv_tools.table.coords import CellAddress
from csv_tools.table.csv_table import CSVTable, build_table, load, serialize

__all__ = [
    "__version__",
    # Table
    "CSVTable",
    "CellAddress",
    "load",
    "build_table",
    "serialize",
    # Files and pandas
    "read_csv_file",
    "write_csv_file",
    "table_to_dataframe",
    "table_from_dataframe",
    # Errors
    "CSVToolsError",
    "MalformedLineError",
    "ShapeMismatchError",
    "DuplicateColumnError",
    "ColumnNotFoundError",
    "IndexOutOfRangeError",
]
