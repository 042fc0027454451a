"""Top-level check interface.

Expose `check_puzzle(puzzle)` that accepts either a Grid or a grid token
(wide, compact, or a '#'-prefixed URL fragment) and runs the whole pipeline:
clues, specification, solve, aggregation.
"""

from typing import Any, Dict

from src.nonogram.aggregator import aggregate
from src.nonogram.clues import extract_clues
from src.nonogram.compiler import compile_specification
from src.nonogram.grid import Grid, read_fragment, serialize
from src.nonogram.render import badge
from src.nonogram.solver_core import BacktrackingSolver, run_solver


def check_puzzle(puzzle: Any, solver=None, limit: int = 0) -> Dict[str, Any]:
    """
    Evaluate a drawing and return its clues, classification and per-cell stats.
    Accepts:
      - Grid instances (used directly)
      - Token strings (decoded via `read_fragment`; malformed tokens give an empty grid)
    """
    if isinstance(puzzle, Grid):
        grid = puzzle
    elif isinstance(puzzle, str):
        grid = read_fragment(puzzle)
    else:
        raise TypeError("check_puzzle expects a Grid instance or token string")

    solver = solver or BacktrackingSolver()
    clues = extract_clues(grid)
    specification = compile_specification(clues.rows, clues.cols)
    outcome = aggregate(run_solver(solver, specification, limit))

    return {
        "token": serialize(grid),
        "row_clues": clues.rows,
        "col_clues": clues.cols,
        "classification": outcome.classification.value,
        "badge": badge(outcome),
        "model_count": outcome.model_count,
        "stats": outcome.stats,
        "contested": [i for i, flag in enumerate(outcome.contested()) if flag],
        "grid": grid,
        "clues": clues,
        "aggregate": outcome,
    }


__all__ = ["check_puzzle"]
