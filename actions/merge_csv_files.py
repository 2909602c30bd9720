#!/usr/bin/env python3
"""
Merge two CSV files side by side.

**What it does**:
  1. Reads the left and right files (same delimiter).
  2. Appends the right file's columns to the left file's columns. Rows are
     paired by position; the shorter file is padded with empty cells.
  3. Writes the result, optionally trimming blank rows first.

Column names must not overlap; the script stops with exit code 1 if they do.

**Usage**:
    ```bash
    python actions/merge_csv_files.py people.csv scores.csv merged.csv
    ```
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
    parser = argparse.ArgumentParser(description="Merge two CSV files side by side")

    parser.add_argument("left", help="CSV file whose columns come first")
    parser.add_argument("right", help="CSV file whose columns are appended")
    parser.add_argument("output", help="Where to write the merged file")

    parser.add_argument(
        "--delimiter",
        type=parse_delimiter,
        default=None,
        help="Delimiter of both files (default: CSV_TOOLS_DELIMITER or ',')",
    )

    parser.add_argument(
        "--trim",
        action="store_true",
        help="Remove leading and trailing blank rows from the result",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        left = read_csv_file(args.left, delimiter=args.delimiter)
        right = read_csv_file(args.right, delimiter=args.delimiter)
        left.merge(right)

        if args.trim:
            left.trim()

        write_csv_file(left, args.output)
    except (OSError, CSVToolsError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"  ✓ Merged {right.width()} column(s) into {args.output}")
    print(f"    {left.count_rows()} rows x {left.width()} columns")
    return 0


if __name__ == "__main__":
    sys.exit(main())
