"""Puzzle session: one grid, its derived state, and serialized solve runs."""

import asyncio
import logging
from typing import Optional

from .aggregator import Aggregate, aggregate
from .clues import Clues, extract_clues
from .compiler import Specification, compile_specification
from .grid import Grid, write_fragment
from .render import badge
from .solver_core import BacktrackingSolver, SolveResult, run_solver

logger = logging.getLogger(__name__)


class PuzzleSession:
    """
    Holds the grid, the clues derived from it, and the latest aggregate.

    Every edit re-runs the pipeline, but only one solve runs at a time. Edits
    made while a solve is running queue behind it; once it finishes only the
    newest queued run goes to the solver, and any result that has been
    superseded is dropped.
    """

    def __init__(self, grid: Optional[Grid] = None, solver=None, limit: int = 0):
        self.grid = grid if grid is not None else Grid()
        self.solver = solver if solver is not None else BacktrackingSolver()
        self.limit = limit
        self.clues: Clues = extract_clues(self.grid)
        self.specification: Optional[Specification] = None
        self.aggregate: Optional[Aggregate] = None
        self.status = badge(None)
        self._generation = 0
        # Created on first use so it binds to the running loop.
        self._solve_lock: Optional[asyncio.Lock] = None

    @property
    def generation(self) -> int:
        return self._generation

    def fragment(self) -> str:
        return write_fragment(self.grid)

    async def toggle(self, index: int) -> Optional[Aggregate]:
        self.grid.toggle(index)
        return await self.refresh()

    async def refresh(self) -> Optional[Aggregate]:
        """Run the pipeline for the current grid; returns None if a newer run superseded this one."""
        self._generation += 1
        generation = self._generation
        if self._solve_lock is None:
            self._solve_lock = asyncio.Lock()

        snapshot = self.grid.copy()
        clues = extract_clues(snapshot)
        specification = compile_specification(clues.rows, clues.cols)
        self.clues = clues
        self.specification = specification
        self.aggregate = None
        self.status = badge(None)

        async with self._solve_lock:
            if generation != self._generation:
                logger.debug("Skipping run %d, superseded by run %d", generation, self._generation)
                return None
            result = await self._solve(specification)

        if generation != self._generation:
            logger.debug("Dropping stale result of run %d (current run %d)", generation, self._generation)
            return None

        outcome = aggregate(result)
        self.aggregate = outcome
        self.status = badge(outcome)
        return outcome

    async def _solve(self, specification: Specification) -> SolveResult:
        result = await asyncio.to_thread(run_solver, self.solver, specification, self.limit)
        if not result.ok:
            logger.warning("Solver failed: %s", result.error)
        return result
