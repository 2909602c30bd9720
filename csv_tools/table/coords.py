"""
Cell coordinates within a table.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CellAddress:
    """
    Position of a cell: row index (header excluded) and column index.

    **Conceptual**: An address only means something relative to one table at
    one point in time. It is not validated on creation; looking up an address
    that falls outside the table simply returns None.

    Attributes:
        row: Zero-based row index into CSVTable.rows.
        column: Zero-based column index into CSVTable.columns.
    """
    row: int
    column: int

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"
