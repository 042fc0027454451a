"""Tests for the puzzle session and its newest-wins solve runs."""

import asyncio
import threading
import time

from src.nonogram.aggregator import Classification
from src.nonogram.grid import Grid, read_fragment
from src.nonogram.session import PuzzleSession
from src.nonogram.solver_core import BacktrackingSolver, SolverError


class SlowFirstSolver:
    """Delays its first call so a second refresh can overtake it."""

    def __init__(self, delay: float = 0.3):
        self.delay = delay
        self.calls = 0
        self.inner = BacktrackingSolver()

    def solve(self, specification, limit=0):
        self.calls += 1
        if self.calls == 1:
            time.sleep(self.delay)
        return self.inner.solve(specification, limit)


class FailingSolver:
    def solve(self, specification, limit=0):
        raise SolverError("backend unavailable")


def test_new_session_is_loading():
    session = PuzzleSession()
    assert session.status == "loading"
    assert session.aggregate is None
    assert session.clues.rows == [[]] * 10


def test_refresh_classifies_current_grid():
    session = PuzzleSession(Grid.from_rows(["###"]))
    outcome = asyncio.run(session.refresh())
    assert outcome is session.aggregate
    assert outcome.classification == Classification.UNIQUE
    assert session.status == "solvable"
    assert session.clues.rows[0] == [3]
    assert "row(1, 1, 3)." in session.specification.text


def test_toggle_refreshes_and_updates_fragment():
    session = PuzzleSession()
    before = session.fragment()
    outcome = asyncio.run(session.toggle(0))
    assert outcome.classification == Classification.UNIQUE
    assert session.fragment() != before
    assert read_fragment(session.fragment()).is_filled(0, 0)


def test_ambiguous_drawing_is_unsolvable_badge():
    session = PuzzleSession(Grid.from_rows(["#.", ".#"]))
    outcome = asyncio.run(session.refresh())
    assert outcome.classification == Classification.AMBIGUOUS
    assert outcome.model_count == 2
    assert session.status == "unsolvable"


def test_newer_refresh_wins_over_slow_older_one():
    solver = SlowFirstSolver()
    session = PuzzleSession(solver=solver)

    async def scenario():
        first = asyncio.ensure_future(session.refresh())
        await asyncio.sleep(0.05)
        session.grid.toggle(0)
        second = await session.refresh()
        return await first, second

    first, second = asyncio.run(scenario())
    assert first is None
    assert second is session.aggregate
    assert session.generation == 2
    # The published stats belong to the toggled grid, not the empty one.
    assert session.aggregate.stats[0] == 1
    assert session.status == "solvable"


def test_solver_failure_is_kept_apart_from_unsolvable():
    session = PuzzleSession(solver=FailingSolver())
    outcome = asyncio.run(session.refresh())
    assert outcome.classification == Classification.ERROR
    assert outcome.stats is None
    assert session.status == "unsolvable"


def test_limit_is_passed_to_solver():
    session = PuzzleSession(Grid.from_rows(["#.", ".#"]), limit=1)
    outcome = asyncio.run(session.refresh())
    assert outcome.model_count == 1


class CountingSolver:
    """Tracks how many solve calls overlap."""

    def __init__(self, delay: float = 0.3):
        self.delay = delay
        self.calls = 0
        self.active = 0
        self.peak = 0
        self._lock = threading.Lock()
        self.inner = BacktrackingSolver()

    def solve(self, specification, limit=0):
        with self._lock:
            self.calls += 1
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delay)
            return self.inner.solve(specification, limit)
        finally:
            with self._lock:
                self.active -= 1


def test_rapid_edits_run_one_solve_at_a_time():
    solver = CountingSolver()
    session = PuzzleSession(solver=solver)

    async def scenario():
        runs = []
        for index in range(4):
            if index:
                session.grid.toggle(index - 1)
            runs.append(asyncio.ensure_future(session.refresh()))
            await asyncio.sleep(0.02)
        return await asyncio.gather(*runs)

    results = asyncio.run(scenario())
    assert solver.peak == 1
    # The first run was already solving; of the queued ones only the newest reaches the solver.
    assert solver.calls == 2
    assert results[:3] == [None, None, None]
    assert results[3] is session.aggregate
    assert session.aggregate.stats[:3] == [1, 1, 1]
    assert session.status == "solvable"
