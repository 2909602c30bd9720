"""
Tests for csv_tools/table/csv_table.py

This module tests:
  - Construction and shape validation.
  - Shape queries (width, count_rows, has_column, ...).
  - Cell lookup and text search.
  - Structural mutations, including that a failed mutation changes nothing.
  - Merging tables with equal and uneven row counts.
  - Blank-row trimming.
  - Projection (map_rows, to_map) and serialization.

Most tests start from the 3x3 `table` fixture in conftest.py:

    a,b,c
    1,2,3
    4,5,6
    7,8,9
"""

import copy
from dataclasses import dataclass

import pytest

from csv_tools.data.schemas import (
    ColumnNotFoundError,
    DuplicateColumnError,
    IndexOutOfRangeError,
    MalformedLineError,
    ShapeMismatchError,
)
from csv_tools.table.coords import CellAddress
from csv_tools.table.csv_table import CSVTable, build_table, load, serialize

E = ""


def make_table(rows, columns=("a", "b", "c")):
    return CSVTable.build(list(columns), rows)


# ============================================================================
# Construction
# ============================================================================

def test_build_keeps_columns_and_rows(fake_columns, fake_rows):
    table = CSVTable.build(fake_columns, fake_rows, ";")

    assert table.columns == fake_columns
    assert table.rows == fake_rows
    assert table.delimiter == ";"


def test_build_copies_its_inputs(fake_columns, fake_rows):
    table = CSVTable.build(fake_columns, fake_rows)
    fake_rows[0][0] = "changed"
    fake_columns.append("d")

    assert table.rows[0][0] == "1"
    assert table.columns == ["a", "b", "c"]


def test_build_with_missing_column_fails(fake_rows):
    with pytest.raises(ShapeMismatchError) as exc_info:
        CSVTable.build(["a", "b"], fake_rows)

    assert exc_info.value.row_index == 0
    assert exc_info.value.actual == 3
    assert exc_info.value.expected == 2


def test_build_with_short_row_fails(fake_columns):
    rows = [["1", "2", "3"], ["4", "5"], ["7", "8", "9"]]
    with pytest.raises(ShapeMismatchError) as exc_info:
        CSVTable.build(fake_columns, rows)

    assert exc_info.value.row_index == 1


def test_build_rejects_multi_character_delimiter(fake_columns, fake_rows):
    with pytest.raises(ValueError):
        CSVTable.build(fake_columns, fake_rows, "::")


def test_default_constructor_is_empty():
    table = CSVTable()

    assert table.is_empty()
    assert table.check_validity()
    assert table.delimiter == ","


def test_module_level_helpers(fake_columns, fake_rows):
    table = build_table(fake_columns, fake_rows)

    assert load(serialize(table).splitlines()) == table


def test_from_lines_with_quotes():
    table = CSVTable.from_lines([
        "name,pseudo,age",
        'Thomas,"The Svelter",20',
        'Yoshiip,"The best, and only, Godoter",99',
    ])

    assert table.columns == ["name", "pseudo", "age"]
    assert table.rows[1] == ["Yoshiip", "The best, and only, Godoter", "99"]


def test_from_lines_malformed_line_aborts_load():
    with pytest.raises(MalformedLineError) as exc_info:
        CSVTable.from_lines(["a,b", "1,2", '"3,4'])

    assert exc_info.value.line_number == 2


def test_from_lines_ragged_rows_fail():
    with pytest.raises(ShapeMismatchError) as exc_info:
        CSVTable.from_lines(["a,b", "1,2", "3,4,5"])

    assert exc_info.value.row_index == 1


# ============================================================================
# Shape queries
# ============================================================================

def test_width_and_count_rows(table):
    assert table.width() == 3
    assert len(table) == 3
    assert table.count_rows() == 3


def test_has_column(table):
    assert table.has_column("a")
    assert table.has_column("b")
    assert table.has_column("c")
    assert not table.has_column("d")


def test_has_no_columns():
    table = CSVTable.build([], [])
    assert table.has_no_columns()
    assert table.is_empty()


def test_has_no_rows(fake_columns):
    table = CSVTable.build(fake_columns, [])

    assert table.has_no_rows()
    assert not table.has_no_columns()
    assert not table.is_empty()


def test_set_delimiter(table):
    assert table.delimiter == ","
    table.set_delimiter(";")
    assert table.delimiter == ";"


def test_set_delimiter_rejects_empty_string(table):
    with pytest.raises(ValueError):
        table.set_delimiter("")
    assert table.delimiter == ","


@pytest.mark.parametrize("delimiter", ['"', "\\"])
def test_set_delimiter_rejects_quote_and_backslash(table, delimiter):
    with pytest.raises(ValueError, match="reserved for quoting"):
        table.set_delimiter(delimiter)
    assert table.delimiter == ","


@pytest.mark.parametrize("delimiter", ['"', "\\"])
def test_build_rejects_quote_and_backslash(delimiter):
    with pytest.raises(ValueError):
        CSVTable.build(["a", "b"], [["1", "2"]], delimiter)

    with pytest.raises(ValueError):
        CSVTable.from_lines(["a,b"], delimiter)


def test_check_validity_on_valid_table(table):
    assert table.check_validity()


def test_check_validity_with_extra_field(table):
    table.rows[0].append("10")
    assert not table.check_validity()


def test_check_validity_with_duplicated_columns(table):
    table.columns[2] = "a"
    assert not table.check_validity()


def test_check_validity_with_missing_field(table):
    table.rows[2].pop()
    assert not table.check_validity()


# ============================================================================
# Cells and search
# ============================================================================

def test_get_cell(table):
    assert table.get_cell(CellAddress(0, 0)) == "1"
    assert table.get_cell(CellAddress(1, 1)) == "5"
    assert table.get_cell(CellAddress(2, 2)) == "9"


def test_get_cell_out_of_range_is_none(table):
    assert table.get_cell(CellAddress(3, 0)) is None
    assert table.get_cell(CellAddress(0, 3)) is None
    assert table.get_cell(CellAddress(-1, 0)) is None
    assert table.get_cell(CellAddress(0, -1)) is None


def test_get_column_index(table):
    assert table.get_column_index("a") == 0
    assert table.get_column_index("b") == 1
    assert table.get_column_index("c") == 2
    assert table.get_column_index("d") is None


def test_find_text_single_match(table):
    result = table.find_text("5")

    assert result == [CellAddress(row=1, column=1)]


def test_find_text_substring_row_major_order():
    table = make_table([
        ["x1", "y", "1"],
        ["z", "11", "w"],
    ])

    assert table.find_text("1") == [
        CellAddress(0, 0),
        CellAddress(0, 2),
        CellAddress(1, 1),
    ]


def test_find_text_no_match(table):
    assert table.find_text("42") == []


# ============================================================================
# Rows
# ============================================================================

def test_add_row(table):
    table.add_row(["10", "11", "12"])

    assert table.count_rows() == 4
    assert table.rows[3] == ["10", "11", "12"]


def test_add_row_is_copied(table):
    values = ["10", "11", "12"]
    table.add_row(values)
    values[0] = "changed"

    assert table.rows[3][0] == "10"


def test_add_row_with_invalid_data(table):
    before = copy.deepcopy(table)

    with pytest.raises(ShapeMismatchError):
        table.add_row(["10", "11", "12", "13"])
    with pytest.raises(ShapeMismatchError):
        table.add_row(["10"])

    assert table == before


def test_remove_row(table):
    table.remove_row(0)

    assert table.count_rows() == 2
    assert table.rows[0] == ["4", "5", "6"]


def test_remove_row_out_of_range(table):
    with pytest.raises(IndexOutOfRangeError):
        table.remove_row(3)
    assert table.count_rows() == 3


# ============================================================================
# Columns
# ============================================================================

def test_add_column(table):
    table.add_column("d")

    assert table.columns[3] == "d"
    assert [row[3] for row in table.rows] == [E, E, E]
    assert table.check_validity()


def test_add_existing_column_fails(table):
    with pytest.raises(DuplicateColumnError) as exc_info:
        table.add_column("a")

    assert exc_info.value.name == "a"
    assert table.width() == 3
    assert all(len(row) == 3 for row in table.rows)


def test_insert_column_at_start(table):
    table.insert_column("d", 0)

    assert table.columns == ["d", "a", "b", "c"]
    assert table.count_rows() == 3
    assert all(len(row) == 4 for row in table.rows)
    assert [row[0] for row in table.rows] == [E, E, E]
    assert table.rows[0][1:] == ["1", "2", "3"]


def test_insert_column_at_width_appends(table):
    table.insert_column("d", 3)

    assert table.columns == ["a", "b", "c", "d"]
    assert table.rows[1] == ["4", "5", "6", E]


def test_insert_column_out_of_range(table):
    with pytest.raises(IndexOutOfRangeError):
        table.insert_column("d", 4)
    assert table.columns == ["a", "b", "c"]


def test_insert_existing_column_fails(table):
    with pytest.raises(DuplicateColumnError):
        table.insert_column("b", 1)
    assert table.columns == ["a", "b", "c"]


def test_remove_column(table):
    table.remove_column(0)

    assert table.columns == ["b", "c"]
    assert table.count_rows() == 3
    assert table.rows == [["2", "3"], ["5", "6"], ["8", "9"]]


def test_remove_column_out_of_range(table):
    with pytest.raises(IndexOutOfRangeError):
        table.remove_column(3)
    assert table.width() == 3


def test_fill_column(table):
    assert [row[1] for row in table.rows] == ["2", "5", "8"]

    table.fill_column("b", ["10", "11", "12"])

    assert [row[1] for row in table.rows] == ["10", "11", "12"]


def test_fill_missing_column(table):
    with pytest.raises(ColumnNotFoundError):
        table.fill_column("d", ["10", "11", "12"])


def test_fill_column_with_wrong_length(table):
    with pytest.raises(ShapeMismatchError):
        table.fill_column("b", ["10", "11"])
    assert [row[1] for row in table.rows] == ["2", "5", "8"]


def test_successful_edits_keep_table_valid(table):
    table.add_column("d")
    table.insert_column("e", 1)
    table.add_row(["r", "s", "t", "u", "v"])
    table.remove_column(2)
    table.remove_row(0)
    table.insert_column("f", table.width())
    table.add_row(["1", "2", "3", "4", "5"])

    assert table.check_validity()
    assert table.width() == 5
    assert table.count_rows() == 4


# ============================================================================
# Merge
# ============================================================================

def test_merge_with_same_number_of_rows(table):
    other = CSVTable.build(["d", "e"], [["1", "2"], ["4", "5"], ["7", "8"]])

    table.merge(other)

    assert table.width() == 5
    assert table.count_rows() == 3
    assert table.columns == ["a", "b", "c", "d", "e"]
    assert table.rows[0] == ["1", "2", "3", "1", "2"]
    assert table.check_validity()


def test_merge_with_less_rows_than_other():
    table = make_table([["1", "2", "3"], ["4", "5", "6"]])
    other = CSVTable.build(["d", "e"], [["1", "2"], ["4", "5"], ["7", "8"]])

    table.merge(other)

    assert table.width() == 5
    assert table.count_rows() == 3
    assert table.rows[2] == [E, E, E, "7", "8"]
    assert table.check_validity()


def test_merge_with_more_rows_than_other(table):
    other = CSVTable.build(["d", "e"], [["1", "2"], ["4", "5"]])

    table.merge(other)

    assert table.width() == 5
    assert table.count_rows() == 3
    assert table.rows[1] == ["4", "5", "6", "4", "5"]
    assert table.rows[2] == ["7", "8", "9", E, E]
    assert table.check_validity()


def test_merge_with_empty_other(table):
    other = CSVTable.build(["d"], [])

    table.merge(other)

    assert table.columns == ["a", "b", "c", "d"]
    assert all(row[3] == E for row in table.rows)
    assert table.check_validity()


def test_merge_into_table_without_rows():
    table = CSVTable.build(["a"], [])
    other = CSVTable.build(["b", "c"], [["1", "2"], ["3", "4"]])

    table.merge(other)

    assert table.rows == [[E, "1", "2"], [E, "3", "4"]]


def test_merge_with_duplicate_column_changes_nothing(table):
    before = copy.deepcopy(table)
    other = CSVTable.build(["d", "a"], [["1", "2"]])

    with pytest.raises(DuplicateColumnError) as exc_info:
        table.merge(other)

    assert exc_info.value.name == "a"
    assert table == before


def test_merge_does_not_share_rows_with_other(table):
    other = CSVTable.build(["d"], [["x"], ["y"], ["z"]])

    table.merge(other)
    other.rows[0][0] = "changed"

    assert table.rows[0][3] == "x"


# ============================================================================
# Trimming
# ============================================================================

def test_trim_end():
    table = make_table([
        ["1", "2", "3"],
        ["4", "5", "6"],
        ["7", "8", "9"],
        [E, E, E],
        [E, "8", E],
        [E, E, E],
        [E, E, E],
    ])
    assert table.count_rows() == 7

    table.trim_end()

    assert table.count_rows() == 5
    assert table.rows[-1] == [E, "8", E]


def test_trim_end_with_one_nonempty_line():
    table = make_table([["1", "2", "3"]])
    table.trim_end()
    assert table.count_rows() == 1


def test_trim_end_with_one_empty_line():
    table = make_table([[E, E, E]])
    table.trim_end()
    assert table.count_rows() == 0
    assert table.has_no_rows()


def test_trim_end_without_rows_is_a_no_op():
    table = make_table([])
    table.trim_end()
    assert table.has_no_rows()


def test_trim_start():
    table = make_table([
        [E, E, E],
        [E, "8", E],
        [E, E, E],
        ["1", "2", "3"],
        ["4", "5", "6"],
        ["7", "8", "9"],
    ])
    assert table.count_rows() == 6

    table.trim_start()

    assert table.count_rows() == 5
    assert table.rows[0] == [E, "8", E]


def test_trim_start_with_one_nonempty_line():
    table = make_table([["1", "2", "3"]])
    table.trim_start()
    assert table.count_rows() == 1


def test_trim_start_with_one_empty_line():
    table = make_table([[E, E, E]])
    table.trim_start()
    assert table.count_rows() == 0


def test_trim():
    table = make_table([
        [E, E, E],
        [E, "8", E],
        [E, E, E],
        ["1", "2", "3"],
        ["4", "5", "6"],
        ["7", "8", "9"],
        [E, E, E],
        [E, "8", E],
        [E, E, E],
    ])
    assert table.count_rows() == 9

    table.trim()

    assert table.count_rows() == 7
    assert table.rows[0] == [E, "8", E]
    assert table.rows[6] == [E, "8", E]


def test_trim_is_idempotent():
    table = make_table([[E, E, E], ["1", E, E], [E, E, E], ["2", E, E], [E, E, E]])

    table.trim()
    once = copy.deepcopy(table)
    table.trim()

    assert table == once
    assert table.rows == [["1", E, E], [E, E, E], ["2", E, E]]


def test_trim_with_one_empty_line():
    table = make_table([[E, E, E]])
    table.trim()
    assert table.has_no_rows()


def test_remove_empty_lines():
    table = make_table([
        [E, E, E],
        [E, "8", E],
        [E, E, E],
        ["1", "2", "3"],
        ["4", "5", "6"],
        ["7", "8", "9"],
        [E, E, E],
        [E, "8", E],
        [E, E, E],
    ])

    table.remove_empty_lines()

    assert table.rows == [
        [E, "8", E],
        ["1", "2", "3"],
        ["4", "5", "6"],
        ["7", "8", "9"],
        [E, "8", E],
    ]


# ============================================================================
# Projection and serialization
# ============================================================================

@dataclass
class Numbers:
    a: int
    b: int
    c: int


def test_map_rows(table):
    result = table.map_rows(lambda row: Numbers(int(row[0]), int(row[1]), int(row[2])))

    assert result == [Numbers(1, 2, 3), Numbers(4, 5, 6), Numbers(7, 8, 9)]


def test_map_rows_does_not_change_table(table):
    table.map_rows(lambda row: row.append("x"))

    assert table.check_validity()
    assert table.rows[0] == ["1", "2", "3"]


def test_map_columns(table):
    mapping = table.map_columns()

    assert mapping == {"a": [], "b": [], "c": []}


def test_to_map_with_conversion(table):
    result = table.to_map(int)

    assert result == {"a": [1, 4, 7], "b": [2, 5, 8], "c": [3, 6, 9]}


def test_to_map_strings(table):
    result = table.to_map(lambda cell: cell)

    assert result["a"] == ["1", "4", "7"]
    assert result["b"] == ["2", "5", "8"]
    assert result["c"] == ["3", "6", "9"]


def test_serialize(table):
    assert table.serialize() == "a,b,c\n1,2,3\n4,5,6\n7,8,9\n"
    assert str(table) == table.serialize()


def test_serialize_uses_current_delimiter(table):
    table.set_delimiter("\t")
    assert table.serialize().splitlines()[1] == "1\t2\t3"


def test_serialize_keeps_empty_cells():
    table = make_table([[E, "x", E]])
    assert table.serialize() == "a,b,c\n,x,\n"


def test_load_serialize_round_trip():
    table = CSVTable.build(
        ["name", "note", "blank"],
        [["Thomas", "The Svelter", ""], ["Lua", "7 of 10", ""]],
        ";",
    )

    reloaded = load(table.serialize().splitlines(), ";")

    assert reloaded == table


def test_empty_table_serializes_to_empty_string():
    """No header line is written when there is nothing to describe."""
    table = CSVTable()

    assert table.serialize() == ""
    assert str(table) == ""
    assert load(table.serialize().splitlines()) == table


def test_table_with_columns_only_still_writes_header():
    table = CSVTable.build(["a", "b"], [])

    assert table.serialize() == "a,b\n"
    assert load(table.serialize().splitlines()) == table


def test_repr_and_equality(table):
    assert "columns=['a', 'b', 'c']" in repr(table)
    assert table == copy.deepcopy(table)
    assert table != CSVTable.build(["a", "b", "c"], [])
    assert table != "a,b,c"
