"""Compile row/column clues into a declarative placement specification.

The emitted text is an answer-set program: dimension facts, one fact per clue,
and the placement, gap and agreement rules that tie the rows and columns of the
board together. The compiler performs no search.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Sequence

from .grid import HEIGHT, WIDTH
from src.utils.trace import get_tracer


class SpecificationError(ValueError):
    """Raised when clues cannot describe a legal board, or a specification is malformed."""


class ClueFact(NamedTuple):
    axis: str  # 'row' or 'col'
    line: int  # 1-based line index
    ordinal: int  # 1-based position of the block within its line
    length: int

    def render(self) -> str:
        return f"{self.axis}({self.line}, {self.ordinal}, {self.length})."


@dataclass(frozen=True)
class Specification:
    text: str
    width: int = WIDTH
    height: int = HEIGHT

    def __str__(self) -> str:
        return self.text


RULES = """\
% each clue is covered by exactly one block of its length on its line
1 { row_block(Y, N, X1, X2) : x(X1), x(X2), X2 - X1 + 1 = L } 1 :- row(Y, N, L).
1 { col_block(X, N, Y1, Y2) : y(Y1), y(Y2), Y2 - Y1 + 1 = L } 1 :- col(X, N, L).

% consecutive blocks on a line keep at least one empty cell between them
:- row_block(Y, N, _, E), row_block(Y, N + 1, S, _), E + 1 >= S.
:- col_block(X, N, _, E), col_block(X, N + 1, S, _), E + 1 >= S.

% cells covered by each axis
row_mark(X, Y) :- row_block(Y, _, X1, X2), x(X), X1 <= X, X <= X2.
col_mark(X, Y) :- col_block(X, _, Y1, Y2), y(Y), Y1 <= Y, Y <= Y2.

% a cell is filled iff both axes cover it
cell(X, Y) :- row_mark(X, Y), col_mark(X, Y).
:- row_mark(X, Y), not col_mark(X, Y).
:- col_mark(X, Y), not row_mark(X, Y).

#show cell/2.
"""


def _check_line(axis: str, line: int, clues: Sequence[int], length: int) -> None:
    for value in clues:
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise SpecificationError(f"{axis} {line}: clue lengths must be positive integers, got {value!r}")
    if clues and sum(clues) + len(clues) - 1 > length:
        raise SpecificationError(
            f"{axis} {line}: clues {list(clues)} need more than {length} cells"
        )


def clue_facts(
    row_clues: Sequence[Sequence[int]], col_clues: Sequence[Sequence[int]]
) -> List[ClueFact]:
    """Validate the clue collections and list them as 1-based facts, rows first."""
    if len(row_clues) != HEIGHT:
        raise SpecificationError(f"Expected {HEIGHT} row clue sequences, got {len(row_clues)}")
    if len(col_clues) != WIDTH:
        raise SpecificationError(f"Expected {WIDTH} column clue sequences, got {len(col_clues)}")

    facts: List[ClueFact] = []
    for y, clues in enumerate(row_clues, start=1):
        _check_line("row", y, clues, WIDTH)
        facts.extend(ClueFact("row", y, n, length) for n, length in enumerate(clues, start=1))
    for x, clues in enumerate(col_clues, start=1):
        _check_line("col", x, clues, HEIGHT)
        facts.extend(ClueFact("col", x, n, length) for n, length in enumerate(clues, start=1))
    return facts


def compile_specification(
    row_clues: Sequence[Sequence[int]], col_clues: Sequence[Sequence[int]]
) -> Specification:
    facts = clue_facts(row_clues, col_clues)
    lines = [
        "% board",
        f"x(1..{WIDTH}).",
        f"y(1..{HEIGHT}).",
        "",
        "% clues",
    ]
    lines.extend(fact.render() for fact in facts)
    lines.append("")
    text = "\n".join(lines) + "\n" + RULES

    get_tracer().log_compile(fact_count=len(facts))
    return Specification(text=text)
