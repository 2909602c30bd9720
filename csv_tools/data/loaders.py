"""
Turn raw text lines into a header and body rows.

**Conceptual**: The loader is the bridge between "some lines of text" and the
in-memory table. It does not open files (see io.py for that); it receives an
iterable of lines, tokenizes the first one into column names and every other
one into a row, and hands the result to CSVTable for shape validation.

**Path selection**: A line goes through the scanning tokenizer only if it
contains a double quote. Every other line is split with str.split, which is
cheaper and gives the same fields for quote-free, backslash-free text.

**Failure model**: The first malformed line aborts the whole load. The error
is re-raised tagged with the line number (0 is the header) so the caller can
find it in the source; no partial table is returned.
"""

import logging
from typing import Iterable, Iterator

from csv_tools.data.schemas import MalformedLineError
from csv_tools.parsing.tokenizer import QUOTE, parse_line, split_line

logger = logging.getLogger("csv-tools")


def line_needs_scanning(line: str) -> bool:
    """True when the line holds a quote and must go through parse_line."""
    return QUOTE in line


def _tokenize(line: str, delimiter: str, number_of_fields: int | None = None) -> list[str]:
    if line_needs_scanning(line):
        return parse_line(line, delimiter, number_of_fields)
    return split_line(line, delimiter)


def read_columns(line: str, delimiter: str) -> list[str]:
    """
    Tokenize the header line into column names.

    Args:
        line: First line of the input, without its line terminator.
        delimiter: Field separator.

    Returns:
        Column names in order.

    Raises:
        MalformedLineError: If the header has an unterminated quote or escape.
    """
    try:
        return _tokenize(line, delimiter)
    except MalformedLineError as e:
        raise e.at_line(0) from e


def read_rows(
    lines: Iterable[str],
    delimiter: str,
    number_of_fields: int | None = None,
    first_line_number: int = 1,
) -> list[list[str]]:
    """
    Tokenize body lines into rows.

    **Functionally**:
      - Each line is tokenized independently, scanning path iff it has a quote.
      - Row lengths are *not* checked here; CSVTable.build does that so the
        error can report the offending row index.
      - Stops at the first malformed line.

    Args:
        lines: Body lines, without line terminators.
        delimiter: Field separator.
        number_of_fields: Expected fields per row, usually the column count.
                          Passed on to the scanner as a hint; rows of any
                          length are still returned.
        first_line_number: Number reported for the first line in errors.
                           Defaults to 1 because line 0 is the header.

    Returns:
        List of rows, one per input line.

    Raises:
        MalformedLineError: Tagged with the number of the first bad line.
    """
    rows: list[list[str]] = []
    scanned = 0
    for line_number, line in enumerate(lines, start=first_line_number):
        try:
            rows.append(_tokenize(line, delimiter, number_of_fields))
        except MalformedLineError as e:
            raise e.at_line(line_number) from e
        if line_needs_scanning(line):
            scanned += 1

    logger.debug(
        f"Tokenized {len(rows)} rows ({scanned} scanned, {len(rows) - scanned} split)"
    )
    return rows


def load_lines(lines: Iterable[str], delimiter: str) -> tuple[list[str], list[list[str]]]:
    """
    Split raw lines into (columns, rows).

    An empty input yields no columns and no rows.

    Args:
        lines: All lines of the input, header first, without line terminators.
        delimiter: Field separator.

    Returns:
        Tuple of column names and body rows.

    Raises:
        MalformedLineError: If any line is malformed.
    """
    iterator: Iterator[str] = iter(lines)
    header = next(iterator, None)
    if header is None:
        return [], []

    columns = read_columns(header, delimiter)
    rows = read_rows(iterator, delimiter, number_of_fields=len(columns))
    return columns, rows
