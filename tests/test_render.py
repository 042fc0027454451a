"""Unit tests for the text outputs handed to a front end."""

from src.nonogram.aggregator import Aggregate, Classification
from src.nonogram.clues import extract_clues
from src.nonogram.grid import Grid
from src.nonogram.render import badge, cell_classes, col_clue_label, render_board, row_clue_label


def test_clue_labels():
    assert row_clue_label([]) == "0"
    assert row_clue_label([2, 3]) == "2 3"
    assert col_clue_label([]) == "0"
    assert col_clue_label([2, 3]) == "2\n3"


def test_badge():
    assert badge(None) == "loading"
    assert badge(Aggregate(Classification.UNIQUE, [0] * 150, 1)) == "solvable"
    assert badge(Aggregate(Classification.AMBIGUOUS, [0] * 150, 2)) == "unsolvable"
    assert badge(Aggregate(Classification.UNSOLVABLE, [0] * 150, 0)) == "unsolvable"
    assert badge(Aggregate(Classification.ERROR, None)) == "unsolvable"


def test_cell_classes_mark_filled_and_contested():
    grid = Grid.from_rows(["#."])
    stats = [0] * 150
    stats[0] = 1
    stats[1] = 1
    classes = cell_classes(grid, Aggregate(Classification.AMBIGUOUS, stats, 2))
    assert classes[0] == "filled err"
    assert classes[1] == "err"
    assert classes[2] == ""
    assert cell_classes(grid, None)[0] == "filled"


def test_render_empty_board():
    grid = Grid()
    lines = render_board(grid, extract_clues(grid)).splitlines()
    assert lines[0] == " ." * 15 + "  0"
    assert lines[10] == " 0" * 15
    assert lines[-1] == "[loading]"


def test_render_board_with_clues_and_contested_cells():
    grid = Grid.from_rows(["#.", ".#"])
    stats = [0] * 150
    for i in (0, 1, 15, 16):
        stats[i] = 1
    outcome = Aggregate(Classification.AMBIGUOUS, stats, 2)
    lines = render_board(grid, extract_clues(grid), outcome).splitlines()
    assert lines[0] == " ? ?" + " ." * 13 + "  1"
    assert lines[2] == " ." * 15 + "  0"
    assert lines[10] == " 1 1" + " 0" * 13
    assert lines[-1] == "[unsolvable]"


def test_render_full_column_keeps_two_digit_clue():
    grid = Grid.from_rows(["#"] * 10)
    lines = render_board(grid, extract_clues(grid)).splitlines()
    assert lines[0] == " #" + " ." * 14 + "  1"
    assert lines[10] == "10" + " 0" * 14
