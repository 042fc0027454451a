"""CSP data structures for line-placement solving.

Each row and column of the board is one variable whose domain holds every legal
placement of that line's blocks. Rows and columns are tied together by one
binary agreement constraint per cell.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

ROW = "row"
COL = "col"


@dataclass(frozen=True, order=True)
class Placement:
    """Start offsets (0-based) of a line's blocks, plus the covered cells as a bitmask."""

    starts: Tuple[int, ...]
    mask: int

    def covers(self, position: int) -> bool:
        return bool((self.mask >> position) & 1)

    def positions(self) -> List[int]:
        return [i for i in range(self.mask.bit_length()) if self.covers(i)]


def line_placements(clues: Sequence[int], length: int) -> List[Placement]:
    """All ways to lay out `clues` on a line of `length` cells, leftmost first."""
    clues = list(clues)
    if not clues:
        return [Placement((), 0)]

    placements: List[Placement] = []

    def _place(n: int, earliest: int, starts: List[int], mask: int) -> None:
        if n == len(clues):
            placements.append(Placement(tuple(starts), mask))
            return
        # Room needed by the remaining blocks, including their one-cell gaps.
        tail = sum(clues[n + 1:]) + len(clues) - n - 1
        for start in range(earliest, length - clues[n] - tail + 1):
            block = ((1 << clues[n]) - 1) << start
            _place(n + 1, start + clues[n] + 1, starts + [start], mask | block)

    _place(0, 0, [], 0)
    return placements


@dataclass
class Variable:
    name: str
    axis: str
    line: int  # 0-based row or column index
    clues: Tuple[int, ...] = ()
    domain: Set[Placement] = field(default_factory=set)


@dataclass
class Constraint:
    """
    Agreement between a row and a column at their crossing cell: the row covers
    the cell exactly when the column does.
    """

    row_var: str
    col_var: str
    x: int
    y: int
    description: str = ""

    def __post_init__(self) -> None:
        if not self.description:
            self.description = f"Agree at cell({self.x + 1},{self.y + 1})"

    @property
    def scope(self) -> List[str]:
        return [self.row_var, self.col_var]

    def involves(self, variable: str) -> bool:
        return variable in (self.row_var, self.col_var)

    def position_in(self, variable: str) -> int:
        """Offset of the crossing cell along `variable`'s line."""
        if variable == self.row_var:
            return self.x
        if variable == self.col_var:
            return self.y
        raise KeyError(f"{variable} is not in the scope of {self.description}")

    def is_satisfied(self, assignment: Dict[str, Placement]) -> bool:
        row = assignment.get(self.row_var)
        col = assignment.get(self.col_var)
        # Partial assignments are allowed; only decide once both lines are placed.
        if row is None or col is None:
            return True
        return row.covers(self.x) == col.covers(self.y)


@dataclass
class CSP:
    variables: List[Variable]
    constraints: List[Constraint]
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        self.variable_names: List[str] = [v.name for v in self.variables]
        if len(set(self.variable_names)) != len(self.variable_names):
            raise ValueError("Variable names must be unique")
        self.by_name: Dict[str, Variable] = {v.name: v for v in self.variables}

        # Domains are mutable during search; keep a canonical copy on the CSP.
        self.domains: Dict[str, Set[Placement]] = {
            var.name: set(var.domain) for var in self.variables
        }

        self.constraints_by_var: Dict[str, List[Constraint]] = {
            name: [] for name in self.variable_names
        }
        self.neighbors: Dict[str, Set[str]] = {name: set() for name in self.variable_names}
        # A row and a column share exactly one cell, so one constraint per pair.
        self._between: Dict[Tuple[str, str], Constraint] = {}
        for constraint in self.constraints:
            a, b = constraint.row_var, constraint.col_var
            if a not in self.neighbors or b not in self.neighbors:
                raise ValueError(f"Constraint {constraint.description} mentions unknown variables")
            self.constraints_by_var[a].append(constraint)
            self.constraints_by_var[b].append(constraint)
            self.neighbors[a].add(b)
            self.neighbors[b].add(a)
            self._between[(a, b)] = constraint
            self._between[(b, a)] = constraint

    def constraints_for(self, variable: str) -> List[Constraint]:
        return self.constraints_by_var.get(variable, [])

    def constraint_between(self, var_a: str, var_b: str) -> Optional[Constraint]:
        return self._between.get((var_a, var_b))

    def is_consistent(self, assignment: Dict[str, Placement]) -> bool:
        """Check whether every constraint is satisfied under the current partial assignment."""
        return all(constraint.is_satisfied(assignment) for constraint in self.constraints)

    def copy_domains(self, domains: Optional[Dict[str, Set[Placement]]] = None) -> Dict[str, Set[Placement]]:
        source = domains if domains is not None else self.domains
        return {var: set(values) for var, values in source.items()}

    def cell_facts(self, assignment: Dict[str, Placement]) -> List[str]:
        """Render a full assignment as sorted 1-based `cell(x,y)` facts."""
        facts = []
        for var in self.variables:
            if var.axis != ROW:
                continue
            for x in assignment[var.name].positions():
                facts.append((var.line, x))
        return [f"cell({x + 1},{y + 1})" for y, x in sorted(facts)]


def build_csp(
    row_clues: Sequence[Sequence[int]], col_clues: Sequence[Sequence[int]]
) -> CSP:
    """One variable per line and one agreement constraint per cell."""
    width, height = len(col_clues), len(row_clues)
    variables: List[Variable] = []
    for y, clues in enumerate(row_clues):
        variables.append(
            Variable(f"row_{y + 1}", ROW, y, tuple(clues), set(line_placements(clues, width)))
        )
    for x, clues in enumerate(col_clues):
        variables.append(
            Variable(f"col_{x + 1}", COL, x, tuple(clues), set(line_placements(clues, height)))
        )

    constraints = [
        Constraint(f"row_{y + 1}", f"col_{x + 1}", x, y)
        for y in range(height)
        for x in range(width)
    ]
    return CSP(variables=variables, constraints=constraints, width=width, height=height)
