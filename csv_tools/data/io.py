"""
File and DataFrame boundary for CSV tables.

**Conceptual**: This module is the *only* place where csv_tools touches the
filesystem or pandas. The core (tokenizer, loader, CSVTable) works on lines
and lists; the functions here adapt that core to the outside world:
  - read_csv_file: open a text file, strip line terminators, load a table.
  - write_csv_file: serialize a table and write it to disk.
  - table_to_dataframe / table_from_dataframe: bridge to pandas for analysis.

**Defaults**: Any argument left as None (delimiter, encoding) is taken from
csv_tools.config.settings, which reads CSV_TOOLS_* environment variables.

**Rule**: Keep I/O here. CSVTable methods never open files, so tables can be
built and tested entirely in memory.
"""

import logging
from pathlib import Path

import pandas as pd

from csv_tools.config.settings import get_settings
from csv_tools.table.csv_table import CSVTable

logger = logging.getLogger("csv-tools")


def read_csv_file(
    path: Path | str,
    delimiter: str | None = None,
    encoding: str | None = None,
) -> CSVTable:
    """
    Read a CSV file into a validated table.

    **Functionally**:
      - Checks that the file exists.
      - Splits the text into lines (\\n, \\r\\n and \\r all end a line) and
        drops the terminators.
      - Parses the first line as the header and the rest as rows.
      - Trims leading/trailing blank rows if CSV_TOOLS_TRIM_ON_LOAD is set.

    An empty file gives an empty table (no columns, no rows).

    Args:
        path: Path to the CSV file. Can be string or pathlib.Path.
        delimiter: Field separator. Defaults to the configured delimiter.
        encoding: Text encoding. Defaults to the configured encoding.

    Returns:
        CSVTable holding the file's contents.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MalformedLineError: If a line has an unterminated quote or escape.
        ShapeMismatchError: If a row's field count differs from the header's.

    Example:
        >>> table = read_csv_file("tests/fixtures/langs.csv")
        >>> table.columns
        ['language', 'level_of_fun', 'level_of_difficulty']
    """
    settings = get_settings().csv
    path = Path(path)
    delimiter = delimiter if delimiter is not None else settings.delimiter
    encoding = encoding if encoding is not None else settings.encoding

    if not path.exists():
        raise FileNotFoundError(
            f"CSV file not found: {path}. "
            f"Ensure the file exists and the path is correct."
        )

    # Universal newlines mode turns "\r\n" and "\r" into "\n"
    with open(path, "r", encoding=encoding) as f:
        lines = f.read().split("\n")

    # A final terminator does not start another row
    if lines[-1] == "":
        lines.pop()

    table = CSVTable.from_lines(lines, delimiter)
    if settings.trim_on_load:
        table.trim()

    logger.info(f"Read {table.count_rows()} rows x {table.width()} columns from {path}")
    return table


def write_csv_file(
    table: CSVTable,
    path: Path | str,
    encoding: str | None = None,
) -> None:
    """
    Write a table to disk using its own delimiter.

    The parent directory is created if it doesn't exist. The output is exactly
    table.serialize(): header, then one line per row, each ending with "\\n".

    Args:
        table: Table to write.
        path: Destination path. Overwritten if it exists.
        encoding: Text encoding. Defaults to the configured encoding.

    Raises:
        OSError: If the file can't be written (permissions, disk full, etc.).
    """
    path = Path(path)
    encoding = encoding if encoding is not None else get_settings().csv.encoding

    path.parent.mkdir(parents=True, exist_ok=True)

    # newline="" so "\n" is written as-is on every platform
    with open(path, "w", encoding=encoding, newline="") as f:
        f.write(table.serialize())

    logger.info(f"Wrote {table.count_rows()} rows x {table.width()} columns to {path}")


def table_to_dataframe(table: CSVTable) -> pd.DataFrame:
    """
    Convert a table to a DataFrame of strings.

    Columns keep their order; every cell stays a string (no type inference),
    so converting back with table_from_dataframe gives an equal table.

    Example:
        >>> table = CSVTable.build(["a", "b"], [["1", "2"]])
        >>> table_to_dataframe(table)
           a  b
        0  1  2
    """
    return pd.DataFrame(table.rows, columns=table.columns, dtype=object)


def table_from_dataframe(df: pd.DataFrame, delimiter: str | None = None) -> CSVTable:
    """
    Build a table from a DataFrame.

    Column labels and cells are converted with str(); missing values (NaN,
    None, NaT) become the empty string. The index is ignored.

    Args:
        df: Source DataFrame.
        delimiter: Delimiter for the new table. Defaults to the configured one.

    Returns:
        New CSVTable.
    """
    delimiter = delimiter if delimiter is not None else get_settings().csv.delimiter
    columns = [str(name) for name in df.columns]
    rows = [
        ["" if pd.isna(value) else str(value) for value in record]
        for record in df.itertuples(index=False, name=None)
    ]
    return CSVTable.build(columns, rows, delimiter)
