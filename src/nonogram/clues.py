"""Derive row and column block-length clues from a grid."""

from dataclasses import dataclass
from typing import List, Sequence

from .grid import HEIGHT, WIDTH, Grid

ClueSequence = List[int]


@dataclass(frozen=True)
class Clues:
    rows: List[ClueSequence]
    cols: List[ClueSequence]


def line_clues(cells: Sequence[int]) -> ClueSequence:
    """Lengths of the maximal filled runs of one line, in encounter order."""
    clues: ClueSequence = []
    current = 0
    for cell in cells:
        if cell:
            current += 1
        elif current > 0:
            clues.append(current)
            current = 0
    if current > 0:
        clues.append(current)
    return clues


def extract_row_clues(grid: Grid) -> List[ClueSequence]:
    return [line_clues(grid.row(y)) for y in range(HEIGHT)]


def extract_col_clues(grid: Grid) -> List[ClueSequence]:
    return [line_clues(grid.column(x)) for x in range(WIDTH)]


def extract_clues(grid: Grid) -> Clues:
    return Clues(rows=extract_row_clues(grid), cols=extract_col_clues(grid))
