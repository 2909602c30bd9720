"""
Field splitting for a single line of delimited text.

**Conceptual**: A CSV line can be split two ways:
  - `split_line`: a plain split at every delimiter. Fast, but only correct
    when the line contains no double quote.
  - `parse_line`: a character-by-character scanner that honours quoted
    fields and backslash escapes. Always correct, slightly slower.

The loader picks `split_line` only for lines without a quote character, so
the scanner is the reference behaviour and the plain split is an
optimization.

**Quoting and escaping rules** (backslash scheme, not RFC 4180 doubling):
  - Inside a pair of double quotes the delimiter is literal.
  - `\\"` is a literal quote, `\\\\` is a literal backslash.
  - A backslash followed by anything else is dropped.
  - The character right after a closing quote is discarded; it is expected
    to be the delimiter or the end of the line.
  - At the end of the line the current field is always pushed, so a line
    ending in a closing quote yields one trailing empty field.
  - A line that ends inside quotes or right after a lone backslash is
    malformed and raises MalformedLineError.

Example:
    >>> parse_line('Yoshiip,"The best, and only, Godoter",99', ",")
    ['Yoshiip', 'The best, and only, Godoter', '99']
"""

from enum import Enum

from csv_tools.data.schemas import MalformedLineError

QUOTE = '"'
ESCAPE = "\\"


class ScanState(Enum):
    """
    States of the quote/escape scanner.

    The scanner is always either inside or outside a quoted field, and either
    has or has not just seen an unconsumed backslash. The four members are
    the product of those two facts.
    """
    NORMAL = (False, False)
    IN_QUOTE = (True, False)
    ESCAPE_PENDING = (False, True)
    IN_QUOTE_ESCAPE_PENDING = (True, True)

    @property
    def quoted(self) -> bool:
        return self.value[0]

    @property
    def escaped(self) -> bool:
        return self.value[1]

    @classmethod
    def of(cls, quoted: bool, escaped: bool) -> "ScanState":
        return cls((quoted, escaped))


def split_line(line: str, delimiter: str) -> list[str]:
    """
    Split a line at every occurrence of the delimiter.

    Only use this when the line has no double quote; quoted fields that
    contain the delimiter would be cut in pieces.

    Args:
        line: One line of text without its line terminator.
        delimiter: Single field separator character.

    Returns:
        List of fields. An empty line yields a single empty field.
    """
    return line.split(delimiter)


def parse_line(line: str, delimiter: str, number_of_fields: int | None = None) -> list[str]:
    """
    Split a line into fields, honouring double quotes and backslash escapes.

    **Functionally**:
      - Walks the line one character at a time driven by ScanState.
      - An unescaped quote opens a quoted field, or closes it. Closing pushes
        the field and discards the following character.
      - The delimiter ends the current field unless the scanner is inside
        quotes. A backslash does not protect a delimiter outside quotes.
      - At the end of the line the current field is always pushed. A line
        that ends with a closing quote therefore gets a trailing empty field
        (`a,"b"` gives `["a", "b", ""]`), and such a row will not match the
        header width in `CSVTable.build`.

    Args:
        line: One line of text without its line terminator.
        delimiter: Single field separator character. Must not be a double
                   quote or a backslash.
        number_of_fields: Expected field count, if known. Advisory only; it
                          never changes the result.

    Returns:
        List of field values with quotes removed and escapes resolved.

    Raises:
        MalformedLineError: If the line ends inside a quoted field or right
                            after an unconsumed backslash.

    Example:
        >>> parse_line(r'a,"Hello, \\"World!",c', ",")
        ['a', 'Hello, "World!', 'c']
    """
    fields: list[str] = []
    field: list[str] = []
    state = ScanState.NORMAL

    chars = iter(line)
    for char in chars:
        quoted, escaped = state.quoted, state.escaped

        if char == ESCAPE:
            # Two backslashes in a row give one literal backslash
            if escaped:
                field.append(char)
            state = ScanState.of(quoted, not escaped)
            continue

        if char == QUOTE and not escaped:
            if quoted:
                fields.append("".join(field))
                field = []
                # Skip the delimiter (or end of line) after the closing quote
                next(chars, None)
            state = ScanState.of(not quoted, False)
            continue

        if char == delimiter and not quoted:
            fields.append("".join(field))
            field = []
        else:
            field.append(char)
        state = ScanState.of(quoted, False)

    if state.quoted:
        raise MalformedLineError(line, "Unterminated quote")
    if state.escaped:
        raise MalformedLineError(line, "Dangling escape character")

    fields.append("".join(field))

    return fields
