"""Grid state for the 15x10 board and its shareable token encodings."""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

WIDTH = 15
HEIGHT = 10
CELL_COUNT = WIDTH * HEIGHT

WIDE = "wide"
COMPACT = "compact"

_WIDE_TOKEN = re.compile(r"[01]{%d}" % CELL_COUNT)
_COMPACT_TOKEN = re.compile(r"[0-7]{%d}" % (CELL_COUNT // 3))


def _empty_cells() -> List[int]:
    return [0] * CELL_COUNT


@dataclass
class Grid:
    """Row-major filled/empty cells, indexed `x + y * WIDTH`."""

    cells: List[int] = field(default_factory=_empty_cells)

    def __post_init__(self) -> None:
        if len(self.cells) != CELL_COUNT:
            raise ValueError(f"Grid needs {CELL_COUNT} cells, got {len(self.cells)}")
        self.cells = [1 if c else 0 for c in self.cells]

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> "Grid":
        """Build a grid from up to HEIGHT strings of '0'/'1' (or '.'/'#'); missing rows stay empty."""
        cells = _empty_cells()
        for y, row in enumerate(rows):
            if y >= HEIGHT or len(row) > WIDTH:
                raise ValueError(f"Row {y + 1} does not fit a {WIDTH}x{HEIGHT} board")
            for x, ch in enumerate(row):
                cells[index_of(x, y)] = 1 if ch in "1#" else 0
        return cls(cells)

    def is_filled(self, x: int, y: int) -> bool:
        return bool(self.cells[index_of(x, y)])

    def toggle(self, index: int) -> None:
        if not 0 <= index < CELL_COUNT:
            raise IndexError(f"Cell index {index} out of range")
        self.cells[index] = 1 - self.cells[index]

    def row(self, y: int) -> List[int]:
        return self.cells[y * WIDTH:(y + 1) * WIDTH]

    def column(self, x: int) -> List[int]:
        return self.cells[x::WIDTH]

    def filled_cells(self) -> Set[Tuple[int, int]]:
        return {(i % WIDTH, i // WIDTH) for i, c in enumerate(self.cells) if c}

    def copy(self) -> "Grid":
        return Grid(list(self.cells))


def index_of(x: int, y: int) -> int:
    return x + y * WIDTH


def serialize_wide(grid: Grid) -> str:
    return "".join(str(c) for c in grid.cells)


def serialize_compact(grid: Grid) -> str:
    cells = grid.cells
    digits = []
    for i in range(0, CELL_COUNT, 3):
        digits.append(str(cells[i] | (cells[i + 1] << 1) | (cells[i + 2] << 2)))
    return "".join(digits)


def serialize(grid: Grid, encoding: str = WIDE) -> str:
    if encoding == WIDE:
        return serialize_wide(grid)
    if encoding == COMPACT:
        return serialize_compact(grid)
    raise ValueError(f"Unknown grid encoding: {encoding}")


def deserialize(token: Optional[str]) -> Grid:
    """
    Decode a wide or compact token. Anything else, including None, decodes to
    an empty grid instead of raising.
    """
    if not isinstance(token, str):
        return Grid()

    if _WIDE_TOKEN.fullmatch(token):
        return Grid([int(ch) for ch in token])

    cells = _empty_cells()
    if _COMPACT_TOKEN.fullmatch(token):
        for i, ch in enumerate(token):
            value = int(ch)
            cells[i * 3] = value & 1
            cells[i * 3 + 1] = (value >> 1) & 1
            cells[i * 3 + 2] = (value >> 2) & 1
    return Grid(cells)


def read_fragment(fragment: Optional[str]) -> Grid:
    """Decode a URL fragment such as '#0123...'; the leading '#' is optional."""
    if isinstance(fragment, str) and fragment.startswith("#"):
        fragment = fragment[1:]
    return deserialize(fragment)


def write_fragment(grid: Grid) -> str:
    # Shared links have always used the compact form.
    return "#" + serialize_compact(grid)
