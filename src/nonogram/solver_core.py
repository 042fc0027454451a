"""Backtracking model enumeration with MRV, forward checking, and AC-3 arc consistency."""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from .compiler import Specification, SpecificationError
from .model import CSP, Placement
from .parser import parse_specification
from src.utils.trace import Tracer, get_tracer

Assignment = Dict[str, Placement]
Domains = Dict[str, Set[Placement]]


class SolverError(RuntimeError):
    """A solver failed outright (as opposed to finding zero models)."""


@dataclass
class SolveResult:
    """Outcome of one solve call: the models found, or an error signal."""

    models: List[FrozenSet[str]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BacktrackingSolver:
    """
    Default solver capability. Any object exposing
    `solve(specification, limit) -> SolveResult` can stand in for it.
    """

    def solve(self, specification: Specification, limit: int = 0) -> SolveResult:
        try:
            csp = parse_specification(specification)
        except SpecificationError as exc:
            return SolveResult(error=str(exc))
        assignments = solve_all(csp, limit=limit)
        return SolveResult(models=[frozenset(csp.cell_facts(a)) for a in assignments])


def run_solver(solver, specification: Specification, limit: int = 0) -> SolveResult:
    """Call any solver, turning a hard failure into an error signal."""
    try:
        return solver.solve(specification, limit)
    except SolverError as exc:
        return SolveResult(error=str(exc))


def solve_all(csp: CSP, limit: int = 0) -> List[Assignment]:
    """
    Enumerate assignments satisfying every constraint. `limit` caps the number
    of models returned; 0 means all of them.
    """
    if limit < 0:
        raise ValueError("limit must be >= 0")
    tracer = get_tracer()
    solutions: List[Assignment] = []
    domains = csp.copy_domains()
    if any(not values for values in domains.values()):
        return solutions
    if not _ac3(csp, domains, tracer):
        return solutions

    _backtrack(csp, {}, domains, solutions, limit, tracer)
    return solutions


def _backtrack(
    csp: CSP,
    assignment: Assignment,
    domains: Domains,
    solutions: List[Assignment],
    limit: int,
    tracer: Optional[Tracer] = None,
) -> bool:
    """Returns True once `limit` models have been collected."""
    tracer = tracer or get_tracer()
    if len(assignment) == len(csp.variable_names):
        if csp.is_consistent(assignment):
            solutions.append(dict(assignment))
            tracer.log_solution_found(assignment_size=len(assignment), model_count=len(solutions))
        return bool(limit) and len(solutions) >= limit

    var = _select_unassigned_variable(csp, assignment, domains)
    if var is None:
        return False

    for value in _order_domain_values(var, domains):
        if not _is_value_consistent(csp, var, value, assignment):
            continue

        local_assignment = dict(assignment)
        local_assignment[var] = value
        tracer.log_assign(
            variable=var,
            value=value.starts,
            domain_size=len(domains[var]),
            assignment_size=len(local_assignment),
        )

        local_domains = csp.copy_domains(domains)
        local_domains[var] = {value}

        if not _forward_check(csp, var, local_assignment, local_domains, tracer):
            continue

        if not _ac3(csp, local_domains, tracer):
            continue

        if _backtrack(csp, local_assignment, local_domains, solutions, limit, tracer):
            return True

    tracer.log_backtrack(var, reason="Domain exhausted")
    return False


def _select_unassigned_variable(csp: CSP, assignment: Assignment, domains: Domains) -> Optional[str]:
    unassigned = [v for v in csp.variable_names if v not in assignment]
    if not unassigned:
        return None
    # Minimum Remaining Values (MRV) heuristic.
    return min(unassigned, key=lambda v: (len(domains[v]), v))


def _order_domain_values(variable: str, domains: Domains) -> List[Placement]:
    # Deterministic ordering for reproducibility.
    return sorted(domains[variable])


def _is_value_consistent(csp: CSP, variable: str, value: Placement, assignment: Assignment) -> bool:
    trial_assignment = dict(assignment)
    trial_assignment[variable] = value
    for constraint in csp.constraints_for(variable):
        if not constraint.is_satisfied(trial_assignment):
            return False
    return True


def _forward_check(
    csp: CSP,
    variable: str,
    assignment: Assignment,
    domains: Domains,
    tracer: Optional[Tracer] = None,
) -> bool:
    """Prune neighbor domains after assigning `variable`."""
    tracer = tracer or get_tracer()
    value = assignment[variable]
    pruned = 0
    for neighbor in csp.neighbors.get(variable, ()):
        if neighbor in assignment:
            continue
        constraint = csp.constraint_between(variable, neighbor)
        filled = value.covers(constraint.position_in(variable))
        position = constraint.position_in(neighbor)
        for neighbor_value in list(domains[neighbor]):
            if neighbor_value.covers(position) != filled:
                domains[neighbor].remove(neighbor_value)
                pruned += 1
        if not domains[neighbor]:
            return False
    if pruned:
        tracer.log_forward_check(variable=variable, domains_pruned=pruned)
    return True


def _ac3(csp: CSP, domains: Domains, tracer: Optional[Tracer] = None) -> bool:
    """Maintain arc consistency across all arcs."""
    tracer = tracer or get_tracer()
    queue: deque[Tuple[str, str]] = deque()
    for var in csp.variable_names:
        for neighbor in csp.neighbors.get(var, ()):
            queue.append((var, neighbor))

    arcs_processed = 0
    variables_affected = 0
    while queue:
        xi, xj = queue.popleft()
        arcs_processed += 1
        if _revise(csp, xi, xj, domains, tracer):
            variables_affected += 1
            if not domains[xi]:
                return False
            for xk in csp.neighbors.get(xi, ()):
                if xk != xj:
                    queue.append((xk, xi))
    if arcs_processed:
        tracer.log_ac3_run(variables_affected=variables_affected, arcs_processed=arcs_processed)
    return True


def _revise(csp: CSP, xi: str, xj: str, domains: Domains, tracer: Optional[Tracer] = None) -> bool:
    """Remove placements of Xi whose crossing cell no placement of Xj agrees with."""
    constraint = csp.constraint_between(xi, xj)
    if constraint is None:
        return False

    # Values the crossing cell can still take on Xj's side.
    pj = constraint.position_in(xj)
    supported = {value.covers(pj) for value in domains[xj]}
    if len(supported) == 2:
        return False

    pi = constraint.position_in(xi)
    before = len(domains[xi])
    domains[xi] = {value for value in domains[xi] if value.covers(pi) in supported}
    if len(domains[xi]) == before:
        return False
    if tracer is not None:
        tracer.log_domain_reduction(xi, new_domain_size=len(domains[xi]), reason=constraint.description)
    return True
