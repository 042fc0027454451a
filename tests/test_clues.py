"""Unit tests for clue extraction."""

from src.nonogram.clues import extract_clues, extract_col_clues, extract_row_clues, line_clues
from src.nonogram.grid import Grid


def test_line_clues_examples():
    assert line_clues([0] * 15) == []
    assert line_clues([1] * 15) == [15]
    assert line_clues([int(c) for c in "110011100000000"]) == [2, 3]
    assert line_clues([int(c) for c in "101010000000001"]) == [1, 1, 1, 1]


def test_row_and_column_counts():
    grid = Grid()
    assert extract_row_clues(grid) == [[]] * 10
    assert extract_col_clues(grid) == [[]] * 15


def test_extract_clues_reads_rows_left_to_right_and_columns_top_to_bottom():
    grid = Grid.from_rows([
        "##.###",
        "#.....",
        "......",
        "#.....",
    ])
    clues = extract_clues(grid)
    assert clues.rows[0] == [2, 3]
    assert clues.rows[1] == [1]
    assert clues.rows[2] == []
    assert clues.cols[0] == [2, 1]
    assert clues.cols[1] == [1]
    assert clues.cols[2] == []
    assert clues.cols[3] == [1]


def test_column_ending_at_bottom_edge_is_flushed():
    grid = Grid.from_rows(["."] * 8 + ["#", "#"])
    assert extract_col_clues(grid)[0] == [2]
