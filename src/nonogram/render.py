"""Text outputs consumed by a front end: clue labels, the badge, and cell classes."""

from typing import List, Optional

from .aggregator import Aggregate, Classification
from .clues import ClueSequence, Clues
from .grid import CELL_COUNT, HEIGHT, WIDTH, Grid, index_of

LOADING = "loading"
SOLVABLE = "solvable"
UNSOLVABLE = "unsolvable"


def row_clue_label(clues: ClueSequence) -> str:
    return " ".join(str(n) for n in clues) if clues else "0"


def col_clue_label(clues: ClueSequence) -> str:
    return "\n".join(str(n) for n in clues) if clues else "0"


def badge(outcome: Optional[Aggregate]) -> str:
    # Errors collapse into "unsolvable" here; the aggregate keeps them apart.
    if outcome is None:
        return LOADING
    return SOLVABLE if outcome.classification == Classification.UNIQUE else UNSOLVABLE


def cell_classes(grid: Grid, outcome: Optional[Aggregate]) -> List[str]:
    contested = outcome.contested() if outcome is not None else [False] * CELL_COUNT
    classes = []
    for filled, err in zip(grid.cells, contested):
        names = []
        if filled:
            names.append("filled")
        if err:
            names.append("err")
        classes.append(" ".join(names))
    return classes


def render_board(grid: Grid, clues: Clues, outcome: Optional[Aggregate] = None) -> str:
    """
    Monospace picture of the board: '#' filled, '.' empty, '?' for cells that
    differ between models. Row clues sit to the right, column clues underneath.
    Every column is two characters wide so a clue of 10 stays readable.
    """
    contested = outcome.contested() if outcome is not None else [False] * CELL_COUNT
    lines = []
    for y in range(HEIGHT):
        row = ""
        for x in range(WIDTH):
            i = index_of(x, y)
            mark = "?" if contested[i] else ("#" if grid.cells[i] else ".")
            row += f"{mark:>2}"
        lines.append(f"{row}  {row_clue_label(clues.rows[y])}")

    depth = max(len(c) for c in clues.cols) or 1
    for k in range(depth):
        row = ""
        for col in clues.cols:
            if not col:
                row += " 0" if k == 0 else "  "
            elif k < len(col):
                row += f"{col[k]:>2}"
            else:
                row += "  "
        lines.append(row.rstrip())
    lines.append(f"[{badge(outcome)}]")
    return "\n".join(lines)
