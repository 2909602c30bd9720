"""
Shape contracts and error types for in-memory CSV tables.

**Conceptual**: A table is only useful if its shape can be trusted: every row
holds exactly one field per column and no two columns share a name. This
module defines that contract and the exceptions raised when it is broken.
Every mutation in `csv_tools.table` validates against these helpers *before*
touching state, so a failed call never leaves a half-updated table behind.

**Error philosophy**:
  - All errors derive from CSVToolsError so callers can catch one type.
  - Messages name the offending values (row index, column name, lengths).
  - Absence in pure lookups (get_cell, get_column_index) is *not* an error;
    those return None. Errors are reserved for operations that cannot proceed.
"""

from typing import Iterable, Sequence


class CSVToolsError(Exception):
    """Base class for every error raised by csv_tools."""
    pass


class MalformedLineError(CSVToolsError):
    """
    Raised when a line ends inside a quoted field or after a lone backslash.

    **Conceptual**: The scanner cannot guess where an unterminated quote was
    meant to end, so the whole load is aborted rather than returning a
    partially parsed table.

    Attributes:
        line: The raw text that failed to parse.
        line_number: Position of the line in the loaded input (0 is the
                     header). None when the tokenizer was called directly.
    """

    def __init__(self, line: str, reason: str, line_number: int | None = None):
        self.line = line
        self.reason = reason
        self.line_number = line_number
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{reason} in {line!r}")

    def at_line(self, line_number: int) -> "MalformedLineError":
        """Return a copy of this error tagged with its position in the input."""
        return MalformedLineError(self.line, self.reason, line_number=line_number)


class ShapeMismatchError(CSVToolsError):
    """
    Raised when a row (or a column fill) has the wrong number of fields.

    Attributes:
        row_index: Index of the offending row, or None when the mismatch is
                   not tied to an existing row (add_row, fill_column).
        actual: Number of fields given.
        expected: Number of fields required.
    """

    def __init__(self, actual: int, expected: int, row_index: int | None = None):
        self.row_index = row_index
        self.actual = actual
        self.expected = expected
        if row_index is not None:
            message = (
                f"Invalid number of fields for row of index {row_index}, "
                f"{actual} were given, but expected {expected}"
            )
        else:
            message = f"Invalid number of fields, {actual} were given, but expected {expected}"
        super().__init__(message)


class DuplicateColumnError(CSVToolsError):
    """Raised when a column name would appear twice in a table."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"The column {name!r} already exists")


class ColumnNotFoundError(CSVToolsError):
    """Raised when an operation needs a column that the table does not have."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"The column {name!r} doesn't exist")


class IndexOutOfRangeError(CSVToolsError, IndexError):
    """
    Raised when a row or column index is outside the table.

    Also an IndexError, so `except IndexError` works for callers that do not
    know about csv_tools.

    Attributes:
        index: The index that was requested.
        limit: The first invalid index (the current row or column count, or
               one past it for insertions).
        kind: "row" or "column".
    """

    def __init__(self, index: int, limit: int, kind: str):
        self.index = index
        self.limit = limit
        self.kind = kind
        super().__init__(f"The {kind} index {index} is out of range (limit {limit})")


def validate_row_lengths(columns: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    """
    Check that every row has exactly one field per column.

    **Functionally**:
      - Walks the rows in order and stops at the first mismatch.
      - The error carries the row index and both lengths so the caller can
        point at the exact line of the source file.

    Args:
        columns: Column names (only the length is used).
        rows: Rows to check.

    Raises:
        ShapeMismatchError: On the first row whose length differs.
    """
    expected = len(columns)
    for index, row in enumerate(rows):
        if len(row) != expected:
            raise ShapeMismatchError(len(row), expected, row_index=index)


def find_duplicate_columns(columns: Iterable[str]) -> list[str]:
    """Return the column names that appear more than once, in first-repeat order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in columns:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def is_blank_row(row: Sequence[str]) -> bool:
    """A row is blank when every field is the empty string."""
    return all(field == "" for field in row)
