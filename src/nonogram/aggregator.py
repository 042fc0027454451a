"""Aggregate a solver's model set into per-cell statistics and a classification."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .grid import CELL_COUNT, HEIGHT, WIDTH, index_of
from .solver_core import SolveResult
from src.utils.trace import get_tracer

_CELL_FACT = re.compile(r"cell\(\s*(\d+)\s*,\s*(\d+)\s*\)")


class Classification(str, Enum):
    UNSOLVABLE = "unsolvable"
    UNIQUE = "unique"
    AMBIGUOUS = "ambiguous"
    ERROR = "error"


@dataclass
class Aggregate:
    classification: Classification
    stats: Optional[List[int]]
    model_count: int = 0

    def contested(self) -> List[bool]:
        """Cells filled in some, but not all, models."""
        if self.stats is None:
            return [False] * CELL_COUNT
        return [0 < count < self.model_count for count in self.stats]


def parse_cell_fact(fact: str) -> int:
    """Map a 1-based `cell(x,y)` fact to its grid index."""
    match = _CELL_FACT.fullmatch(fact.strip())
    if not match:
        raise ValueError(f"Not a cell fact: {fact!r}")
    x, y = int(match.group(1)), int(match.group(2))
    if not (1 <= x <= WIDTH and 1 <= y <= HEIGHT):
        raise ValueError(f"Cell fact outside the board: {fact!r}")
    return index_of(x - 1, y - 1)


def compile_stats(models: Iterable[Iterable[str]]) -> List[int]:
    stats = [0] * CELL_COUNT
    for model in models:
        for fact in model:
            stats[parse_cell_fact(fact)] += 1
    return stats


def classify(model_count: int) -> Classification:
    if model_count == 0:
        return Classification.UNSOLVABLE
    if model_count == 1:
        return Classification.UNIQUE
    return Classification.AMBIGUOUS


def aggregate(result: SolveResult) -> Aggregate:
    tracer = get_tracer()
    if not result.ok:
        tracer.log_aggregate(Classification.ERROR.value, model_count=0)
        return Aggregate(Classification.ERROR, stats=None)

    models = result.models
    outcome = Aggregate(classify(len(models)), compile_stats(models), len(models))
    tracer.log_aggregate(outcome.classification.value, model_count=len(models))
    return outcome
