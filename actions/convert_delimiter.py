#!/usr/bin/env python3
"""
Re-save a CSV file with a different delimiter.

**Purpose**: Reads a CSV file with one delimiter, optionally drops blank rows,
and writes it back out with another delimiter. Quoted fields are unquoted on
read and written as stored, so values containing the new delimiter will not
survive a later re-read; the script warns when it sees one.

**Usage**:
    From project root:
    ```bash
    # Comma to semicolon
    python actions/convert_delimiter.py data.csv data_semicolon.csv --to ";"

    # Tab-separated input, trim leading/trailing blank rows
    python actions/convert_delimiter.py data.tsv data.csv --from tab --to , --trim
    ```

**Exit codes**:
  - 0: Success
  - 1: Input missing or malformed
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from csv_tools.config.settings import parse_delimiter
from csv_tools.data.io import read_csv_file, write_csv_file
from csv_tools.data.schemas import CSVToolsError


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: source, target, from_delimiter,
        to_delimiter, trim, remove_empty.
    """
    parser = argparse.ArgumentParser(
        description="Re-save a CSV file with a different delimiter",
    )

    parser.add_argument("source", help="CSV file to read")
    parser.add_argument("target", help="Where to write the converted file")

    parser.add_argument(
        "--from",
        dest="from_delimiter",
        type=parse_delimiter,
        default=None,
        help="Delimiter of the source file (default: CSV_TOOLS_DELIMITER or ',')",
    )

    parser.add_argument(
        "--to",
        dest="to_delimiter",
        type=parse_delimiter,
        required=True,
        help="Delimiter for the target file ('tab' for a tab)",
    )

    parser.add_argument(
        "--trim",
        action="store_true",
        help="Remove leading and trailing blank rows",
    )

    parser.add_argument(
        "--remove-empty",
        action="store_true",
        help="Remove every blank row",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Convert one file. Returns the process exit code.
    """
    args = parse_args(argv)

    try:
        table = read_csv_file(args.source, delimiter=args.from_delimiter)
        table.set_delimiter(args.to_delimiter)

        if args.trim:
            table.trim()
        if args.remove_empty:
            table.remove_empty_lines()

        clashes = table.find_text(args.to_delimiter)
        if clashes:
            print(f"  ! {len(clashes)} cell(s) contain {args.to_delimiter!r}, first at {clashes[0]}")

        write_csv_file(table, args.target)
    except (OSError, CSVToolsError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"  ✓ Wrote {table.count_rows()} rows x {table.width()} columns to {args.target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
