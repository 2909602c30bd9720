"""
In-memory CSV table with shape-preserving mutations.

**Conceptual**: CSVTable holds a header (`columns`), a list of rows of string
fields, and the delimiter used when the table is written back out. It is the
object every other part of csv_tools produces or consumes:
  - The loader builds one from raw lines.
  - io.py reads/writes one from/to disk and converts to/from pandas.
  - Callers mutate it in place (add/insert/remove/fill/merge/trim).

**Invariant**: every row has exactly `len(columns)` fields and no two column
names are equal. All public mutators check their preconditions first and
raise before touching any state, so a failed call leaves the table exactly
as it was. `check_validity()` reports whether the invariant holds (it can be
broken by editing `rows`/`columns` directly).

**Blank rows**: a row whose every field is "" is considered blank. The trim
helpers remove leading/trailing blank rows; remove_empty_lines removes all
of them.

Example:
    >>> table = CSVTable.build(["a", "b"], [["1", "2"], ["3", "4"]])
    >>> table.add_column("c")
    >>> table.fill_column("c", ["x", "y"])
    >>> print(table, end="")
    a,b,c
    1,2,x
    3,4,y
"""

import logging
from typing import Callable, Iterable, Sequence, TypeVar

from csv_tools.data.loaders import load_lines
from csv_tools.data.schemas import (
    ColumnNotFoundError,
    DuplicateColumnError,
    IndexOutOfRangeError,
    ShapeMismatchError,
    find_duplicate_columns,
    is_blank_row,
    validate_row_lengths,
)
from csv_tools.parsing.tokenizer import ESCAPE, QUOTE
from csv_tools.table.coords import CellAddress

logger = logging.getLogger("csv-tools")

T = TypeVar("T")


def _check_delimiter(delimiter: str) -> None:
    if len(delimiter) != 1:
        raise ValueError(f"The delimiter must be a single character, got {delimiter!r}")
    if delimiter in (QUOTE, ESCAPE):
        raise ValueError(f"The delimiter cannot be {delimiter!r}; it is reserved for quoting")


class CSVTable:
    """
    A CSV table: delimiter, column names and rows of string fields.

    Construct with `CSVTable.build` (or the constructor, which is the same
    thing) from explicit columns and rows, or with `CSVTable.from_lines`
    from raw text lines. Both copy their inputs; the table never shares row
    lists with the caller.

    Attributes:
        delimiter: Single character placed between fields on serialization.
        columns: Column names, in order.
        rows: Data rows (header excluded), each a list of strings.
    """

    def __init__(
        self,
        columns: Sequence[str] = (),
        rows: Iterable[Sequence[str]] = (),
        delimiter: str = ",",
    ):
        _check_delimiter(delimiter)
        columns = list(columns)
        rows = [list(row) for row in rows]
        validate_row_lengths(columns, rows)

        self.delimiter = delimiter
        self.columns: list[str] = columns
        self.rows: list[list[str]] = rows

    @classmethod
    def build(
        cls,
        columns: Sequence[str],
        rows: Iterable[Sequence[str]],
        delimiter: str = ",",
    ) -> "CSVTable":
        """
        Build a table from explicit columns and rows.

        Args:
            columns: Column names.
            rows: Rows, each with exactly len(columns) fields.
            delimiter: Field separator used on serialization.

        Returns:
            New CSVTable holding copies of the inputs.

        Raises:
            ShapeMismatchError: If any row has the wrong length; the error
                                names the row index and both lengths.
            ValueError: If the delimiter is not a single character, or is a
                        double quote or backslash.
        """
        return cls(columns, rows, delimiter)

    @classmethod
    def from_lines(cls, lines: Iterable[str], delimiter: str = ",") -> "CSVTable":
        """
        Parse raw text lines (header first) into a validated table.

        Raises:
            MalformedLineError: On an unterminated quote or dangling escape.
            ShapeMismatchError: If a body row's field count differs from the
                                header's. A row that ends in a quoted value
                                carries one extra empty field and fails here.
            ValueError: If the delimiter is not a usable single character.
        """
        _check_delimiter(delimiter)
        columns, rows = load_lines(lines, delimiter)
        return cls(columns, rows, delimiter)

    # ------------------------------------------------------------------
    # Shape queries
    # ------------------------------------------------------------------

    def width(self) -> int:
        """Number of columns."""
        return len(self.columns)

    def __len__(self) -> int:
        return self.width()

    def count_rows(self) -> int:
        """Number of data rows, header excluded."""
        return len(self.rows)

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def has_no_rows(self) -> bool:
        return not self.rows

    def has_no_columns(self) -> bool:
        return not self.columns

    def is_empty(self) -> bool:
        """True when the table has neither columns nor rows."""
        return self.has_no_rows() and self.has_no_columns()

    def check_validity(self) -> bool:
        """
        Report whether the shape invariant holds.

        Returns False if a column name is duplicated or if any row's length
        differs from the number of columns. Nothing is repaired.
        """
        if find_duplicate_columns(self.columns):
            return False
        width = self.width()
        return all(len(row) == width for row in self.rows)

    def set_delimiter(self, delimiter: str) -> None:
        """Change the delimiter used by later serialization.

        Raises ValueError for anything but a single character, and for the
        double quote and backslash, which the reader treats as special.
        """
        _check_delimiter(delimiter)
        self.delimiter = delimiter

    # ------------------------------------------------------------------
    # Cells and search
    # ------------------------------------------------------------------

    def get_column_index(self, name: str) -> int | None:
        """Index of the first column called `name`, or None."""
        try:
            return self.columns.index(name)
        except ValueError:
            return None

    def get_cell(self, address: CellAddress) -> str | None:
        """
        Value at `address`, or None if the row or column is out of range.

        Negative indices are out of range; they do not wrap around.
        """
        if not 0 <= address.row < len(self.rows):
            return None
        row = self.rows[address.row]
        if not 0 <= address.column < len(row):
            return None
        return row[address.column]

    def find_text(self, text: str) -> list[CellAddress]:
        """
        Addresses of every cell containing `text`, in row-major order.

        Example:
            >>> table = CSVTable.build(["a"], [["apple"], ["pear"], ["grape"]])
            >>> [str(address) for address in table.find_text("ap")]
            ['(0, 0)', '(2, 0)']
        """
        return [
            CellAddress(row_index, column_index)
            for row_index, row in enumerate(self.rows)
            for column_index, cell in enumerate(row)
            if text in cell
        ]

    # ------------------------------------------------------------------
    # Structural mutation
    # ------------------------------------------------------------------

    def add_row(self, values: Sequence[str]) -> None:
        """
        Append a row.

        Raises:
            ShapeMismatchError: If len(values) != width().
        """
        if len(values) != self.width():
            raise ShapeMismatchError(len(values), self.width())
        self.rows.append(list(values))

    def add_column(self, name: str) -> None:
        """
        Append a column; every existing row gets an empty cell.

        Raises:
            DuplicateColumnError: If the name is already taken.
        """
        if name in self.columns:
            raise DuplicateColumnError(name)
        self.columns.append(name)
        for row in self.rows:
            row.append("")

    def insert_column(self, name: str, index: int) -> None:
        """
        Insert a column at `index`, shifting later columns right.

        `index == width()` appends. Every row gets an empty cell at `index`.

        Raises:
            IndexOutOfRangeError: If index is negative or greater than width().
            DuplicateColumnError: If the name is already taken.
        """
        if not 0 <= index <= self.width():
            raise IndexOutOfRangeError(index, self.width() + 1, "column")
        if name in self.columns:
            raise DuplicateColumnError(name)
        self.columns.insert(index, name)
        for row in self.rows:
            row.insert(index, "")

    def remove_column(self, index: int) -> None:
        """
        Remove the column at `index` along with its cell in every row.

        Raises:
            IndexOutOfRangeError: If index is not a valid column index.
        """
        if not 0 <= index < self.width():
            raise IndexOutOfRangeError(index, self.width(), "column")
        del self.columns[index]
        for row in self.rows:
            del row[index]

    def remove_row(self, index: int) -> None:
        """
        Remove the row at `index`.

        Raises:
            IndexOutOfRangeError: If index is not a valid row index.
        """
        if not 0 <= index < self.count_rows():
            raise IndexOutOfRangeError(index, self.count_rows(), "row")
        del self.rows[index]

    def fill_column(self, name: str, values: Sequence[str]) -> None:
        """
        Overwrite column `name` row by row with `values`.

        Raises:
            ColumnNotFoundError: If the column doesn't exist.
            ShapeMismatchError: If len(values) != count_rows().
        """
        index = self.get_column_index(name)
        if index is None:
            raise ColumnNotFoundError(name)
        if len(values) != self.count_rows():
            raise ShapeMismatchError(len(values), self.count_rows())
        for row, value in zip(self.rows, values):
            row[index] = value

    def merge(self, other: "CSVTable") -> None:
        """
        Append `other`'s columns to the right of this table.

        **Functionally**:
          - Column names must not overlap; nothing changes if they do.
          - If this table has fewer rows, blank rows (of this table's
            original width) are appended until the counts match.
          - If this table has more rows, every row from index
            other.count_rows() onward gets other.width() empty cells.
          - Then other's rows are appended field-wise to the matching rows.

        `other` is assumed valid; its shape is not re-checked.

        Raises:
            DuplicateColumnError: On the first column of `other` already
                                  present in this table.
        """
        for name in other.columns:
            if name in self.columns:
                raise DuplicateColumnError(name)

        own_width = self.width()
        own_rows = self.count_rows()
        other_rows = other.count_rows()

        if own_rows < other_rows:
            for _ in range(other_rows - own_rows):
                self.rows.append([""] * own_width)
        else:
            # Rows with no counterpart in `other`, boundary row included
            for row in self.rows[other_rows:]:
                row.extend([""] * other.width())

        self.columns.extend(other.columns)
        for row, other_row in zip(self.rows, other.rows):
            row.extend(other_row)

        logger.debug(
            f"Merged {other.width()} columns and {other_rows} rows into a table of "
            f"{own_width} columns and {own_rows} rows"
        )

    # ------------------------------------------------------------------
    # Blank-row trimming
    # ------------------------------------------------------------------

    def trim_end(self) -> None:
        """Remove trailing blank rows, stopping at the last non-blank row."""
        while self.rows and is_blank_row(self.rows[-1]):
            self.rows.pop()

    def trim_start(self) -> None:
        """Remove leading blank rows, stopping at the first non-blank row."""
        leading = 0
        while leading < len(self.rows) and is_blank_row(self.rows[leading]):
            leading += 1
        del self.rows[:leading]

    def trim(self) -> None:
        """Remove leading and trailing blank rows."""
        before = self.count_rows()
        self.trim_start()
        self.trim_end()
        logger.debug(f"Trimmed {before - self.count_rows()} blank rows")

    def remove_empty_lines(self) -> None:
        """Remove every blank row, keeping the order of the others."""
        self.rows = [row for row in self.rows if not is_blank_row(row)]

    # ------------------------------------------------------------------
    # Projection and serialization
    # ------------------------------------------------------------------

    def map_rows(self, transform: Callable[[list[str]], T]) -> list[T]:
        """Apply `transform` to a copy of each row, in order. The table is not changed."""
        return [transform(list(row)) for row in self.rows]

    def map_columns(self) -> dict[str, list]:
        """Map every column name to a new empty list."""
        return {name: [] for name in self.columns}

    def to_map(self, transform: Callable[[str], T]) -> dict[str, list[T]]:
        """
        Transpose the table into {column name: [transform(cell), ...]}.

        Values keep row order within each column.

        Example:
            >>> table = CSVTable.build(["a", "b"], [["1", "2"], ["3", "4"]])
            >>> table.to_map(int)
            {'a': [1, 3], 'b': [2, 4]}
        """
        mapping = self.map_columns()
        for row in self.rows:
            for name, cell in zip(self.columns, row):
                mapping[name].append(transform(cell))
        return mapping

    def serialize(self) -> str:
        """
        Render the header and every row as delimited, newline-terminated lines.

        Values are written as stored; no quoting is added. A table with no
        columns and no rows renders as the empty string, which loads back
        as the same empty table.
        """
        if self.is_empty():
            return ""
        lines = [self.columns, *self.rows]
        return "".join(self.delimiter.join(line) + "\n" for line in lines)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return (
            f"CSVTable(delimiter={self.delimiter!r}, columns={self.columns!r}, "
            f"rows={self.rows!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CSVTable):
            return NotImplemented
        return (
            self.delimiter == other.delimiter
            and self.columns == other.columns
            and self.rows == other.rows
        )

    __hash__ = None


def load(lines: Iterable[str], delimiter: str = ",") -> CSVTable:
    """Parse raw lines (header first) into a table. See CSVTable.from_lines."""
    return CSVTable.from_lines(lines, delimiter)


def build_table(
    columns: Sequence[str],
    rows: Iterable[Sequence[str]],
    delimiter: str = ",",
) -> CSVTable:
    """Build a table from explicit columns and rows. See CSVTable.build."""
    return CSVTable.build(columns, rows, delimiter)


def serialize(table: CSVTable) -> str:
    """Render a table as delimited text. See CSVTable.serialize."""
    return table.serialize()
