"""Specification parser: read a compiled placement program back into a CSP.

Only the facts are interpreted (board dimensions and clues). The rule section is
checked for presence, since its meaning is fixed by the line-placement model.
"""

from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .compiler import SpecificationError, Specification
from .model import CSP, build_csp

_DIMENSION = re.compile(r"^\s*([xy])\(\s*1\s*\.\.\s*(\d+)\s*\)\.", re.MULTILINE)
_CLUE = re.compile(r"^\s*(row|col)\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)\.", re.MULTILINE)

_REQUIRED_RULES = (
    "row_block(",
    "col_block(",
    ":- row_block(Y, N, _, E), row_block(Y, N + 1, S, _), E + 1 >= S.",
    ":- col_block(X, N, _, E), col_block(X, N + 1, S, _), E + 1 >= S.",
    "cell(X, Y) :-",
    ":- row_mark(X, Y), not col_mark(X, Y).",
    ":- col_mark(X, Y), not row_mark(X, Y).",
    "#show cell/2.",
)


def _strip_comments(text: str) -> str:
    return "\n".join(line.split("%", 1)[0] for line in text.splitlines())


def parse_specification(spec: Specification | str) -> CSP:
    text = _strip_comments(str(spec))

    # 1) Board dimensions
    dims: Dict[str, int] = {}
    for axis, size in _DIMENSION.findall(text):
        if axis in dims:
            raise SpecificationError(f"Dimension {axis} declared twice")
        dims[axis] = int(size)
    if "x" not in dims or "y" not in dims:
        raise SpecificationError("Specification does not declare board dimensions")
    width, height = dims["x"], dims["y"]
    if width <= 0 or height <= 0:
        raise SpecificationError("Board dimensions must be positive")

    # 2) Rules must all be present
    missing = [rule for rule in _REQUIRED_RULES if rule not in text]
    if missing:
        raise SpecificationError(f"Specification is missing rules: {', '.join(missing)}")

    # 3) Clue facts, grouped per line
    lines: Dict[Tuple[str, int], Dict[int, int]] = {}
    for axis, raw_line, raw_ordinal, raw_length in _CLUE.findall(text):
        line, ordinal, length = int(raw_line), int(raw_ordinal), int(raw_length)
        limit = height if axis == "row" else width
        if not 1 <= line <= limit:
            raise SpecificationError(f"{axis} {line} is outside the board")
        if length <= 0:
            raise SpecificationError(f"{axis} {line}: block {ordinal} has length {length}")
        ordinals = lines.setdefault((axis, line), {})
        if ordinal in ordinals and ordinals[ordinal] != length:
            raise SpecificationError(f"{axis} {line}: block {ordinal} declared with two lengths")
        ordinals[ordinal] = length

    row_clues: List[List[int]] = [[] for _ in range(height)]
    col_clues: List[List[int]] = [[] for _ in range(width)]
    for (axis, line), ordinals in lines.items():
        if sorted(ordinals) != list(range(1, len(ordinals) + 1)):
            raise SpecificationError(f"{axis} {line}: block ordinals are not contiguous from 1")
        clues = [ordinals[n] for n in sorted(ordinals)]
        length = width if axis == "row" else height
        if sum(clues) + len(clues) - 1 > length:
            raise SpecificationError(f"{axis} {line}: clues {clues} need more than {length} cells")
        if axis == "row":
            row_clues[line - 1] = clues
        else:
            col_clues[line - 1] = clues

    return build_csp(row_clues, col_clues)
