"""
Shared type definitions for the pipe loop analyzer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    """Cardinal direction, used both for travel and for the side a tile was entered from."""

    N = "N"  # Up (decreasing y)
    S = "S"  # Down (increasing y)
    E = "E"  # Right (increasing x)
    W = "W"  # Left (decreasing x)

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}

# (dx, dy) per direction
_DELTAS = {
    Direction.N: (0, -1),
    Direction.S: (0, 1),
    Direction.E: (1, 0),
    Direction.W: (-1, 0),
}


class CellClass(Enum):
    """Classification of a grid cell relative to the loop."""

    LOOP = "loop"
    INSIDE = "inside"
    OUTSIDE = "outside"


# =============================================================================
# Tile Symbols
# =============================================================================

VERTICAL = "|"
HORIZONTAL = "-"
NORTH_EAST = "L"
NORTH_WEST = "J"
SOUTH_WEST = "7"
SOUTH_EAST = "F"
GROUND = "."
START = "S"

PIPE_SYMBOLS = (VERTICAL, HORIZONTAL, NORTH_EAST, NORTH_WEST, SOUTH_WEST, SOUTH_EAST)


# =============================================================================
# Errors
# =============================================================================


class PipeMazeError(ValueError):
    """Base class for failures while analyzing a pipe grid."""


class MalformedInputError(PipeMazeError):
    """The input buffer cannot be turned into a grid."""


class BrokenLoopError(PipeMazeError):
    """The pipes reachable from the start do not close into a single loop."""


class AmbiguousStartShapeError(PipeMazeError):
    """The start tile does not connect to exactly two neighbors."""


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class AnalysisRules:
    """Rules governing parsing and loop analysis."""

    require_start: bool = True  # False = fall back to (0, 0) when no S is present
    verify_both_directions: bool = True  # Walk the loop both ways and compare


@dataclass(frozen=True)
class Coordinate:
    """A cell position; x is the column, y is the row."""

    x: int
    y: int

    def step(self, direction: Direction, width: int, height: int) -> Coordinate | None:
        """Return the neighbor in ``direction``, or None if it lies outside a width x height grid."""
        dx, dy = _DELTAS[direction]
        x = self.x + dx
        y = self.y + dy
        if x < 0 or y < 0 or x >= width or y >= height:
            return None
        return Coordinate(x, y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class PipeGrid:
    """A rectangular grid of tile symbols with a marked start tile."""

    rows: tuple[str, ...]
    start: Coordinate

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def contains(self, at: Coordinate) -> bool:
        return 0 <= at.x < self.width and 0 <= at.y < self.height

    def get(self, at: Coordinate) -> str:
        return self.rows[at.y][at.x]

    def neighbor(self, at: Coordinate, direction: Direction) -> Coordinate | None:
        return at.step(direction, self.width, self.height)

    def with_tile(self, at: Coordinate, symbol: str) -> PipeGrid:
        """Return a copy of this grid with the tile at ``at`` replaced by ``symbol``."""
        row = self.rows[at.y]
        patched = row[: at.x] + symbol + row[at.x + 1 :]
        rows = self.rows[: at.y] + (patched,) + self.rows[at.y + 1 :]
        return PipeGrid(rows, self.start)
