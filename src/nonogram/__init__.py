"""Grid codec, clue extraction, specification compiler, and model aggregation for 15x10 picture puzzles."""

from .grid import Grid, serialize, deserialize, read_fragment, write_fragment
from .clues import Clues, extract_clues, extract_row_clues, extract_col_clues
from .compiler import Specification, SpecificationError, compile_specification
from .solver_core import BacktrackingSolver, SolveResult, SolverError, run_solver, solve_all
from .aggregator import Aggregate, Classification, aggregate
from .session import PuzzleSession

__all__ = [
    "Grid",
    "serialize",
    "deserialize",
    "read_fragment",
    "write_fragment",
    "Clues",
    "extract_clues",
    "extract_row_clues",
    "extract_col_clues",
    "Specification",
    "SpecificationError",
    "compile_specification",
    "BacktrackingSolver",
    "SolveResult",
    "SolverError",
    "run_solver",
    "solve_all",
    "Aggregate",
    "Classification",
    "aggregate",
    "PuzzleSession",
]
