"""
Connectivity model for pipe tiles.

Every rule about which tiles connect is derived from the single CONNECTIONS
table: the exit taken through a tile, whether a tile can be entered from a
given side, and which pipe shape matches a pair of directions.
"""

from __future__ import annotations

from typing import Iterable

from pipe_types import (
    HORIZONTAL,
    NORTH_EAST,
    NORTH_WEST,
    SOUTH_EAST,
    SOUTH_WEST,
    START,
    VERTICAL,
    Coordinate,
    Direction,
    PipeGrid,
)

__all__ = [
    "CONNECTIONS",
    "ENTERABLE",
    "connects",
    "exit_direction",
    "enterable",
    "next_step",
    "start_neighbors",
    "shape_for",
]

# Pipe symbol -> the two sides it connects
CONNECTIONS: dict[str, frozenset[Direction]] = {
    VERTICAL: frozenset({Direction.N, Direction.S}),
    HORIZONTAL: frozenset({Direction.W, Direction.E}),
    NORTH_EAST: frozenset({Direction.N, Direction.E}),
    NORTH_WEST: frozenset({Direction.N, Direction.W}),
    SOUTH_WEST: frozenset({Direction.S, Direction.W}),
    SOUTH_EAST: frozenset({Direction.S, Direction.E}),
}

_SHAPES: dict[frozenset[Direction], str] = {sides: symbol for symbol, sides in CONNECTIONS.items()}

# Direction of travel -> symbols that can be entered moving that way.
# Moving north lands on a tile's south side, so it needs a south connector.
ENTERABLE: dict[Direction, frozenset[str]] = {
    moving: frozenset(
        {symbol for symbol, sides in CONNECTIONS.items() if moving.opposite in sides} | {START}
    )
    for moving in Direction
}


def connects(symbol: str, side: Direction) -> bool:
    """Check whether ``symbol`` has a connector on ``side``."""
    return side in CONNECTIONS.get(symbol, frozenset())


def exit_direction(symbol: str, arrived_from: Direction) -> Direction | None:
    """
    Return the direction of travel out of a tile entered from ``arrived_from``.

    A tile only continues along its two connectors: the arrival side must be
    one of them and the exit is the other. Start, ground and unknown symbols
    have no continuation.
    """
    sides = CONNECTIONS.get(symbol)
    if sides is None or arrived_from not in sides:
        return None
    (other,) = sides - {arrived_from}
    return other


def enterable(symbol: str, moving: Direction) -> bool:
    """Check whether a tile showing ``symbol`` can be entered while moving ``moving``."""
    return symbol in ENTERABLE[moving]


def next_step(
    grid: PipeGrid, at: Coordinate, arrived_from: Direction
) -> tuple[Coordinate, Direction] | None:
    """
    Follow the pipe at ``at`` one tile further.

    Args:
        grid: The grid being walked
        at: Current tile
        arrived_from: Side of the current tile the walk came in through

    Returns:
        (next coordinate, side of the next tile it is entered from), or None
        if the pipe dead-ends: no exit for this arrival side, the exit leaves
        the grid, or the next tile has no connector facing back.
    """
    moving = exit_direction(grid.get(at), arrived_from)
    if moving is None:
        return None

    candidate = grid.neighbor(at, moving)
    if candidate is None or not enterable(grid.get(candidate), moving):
        return None

    return (candidate, moving.opposite)


def start_neighbors(grid: PipeGrid, at: Coordinate) -> list[tuple[Coordinate, Direction]]:
    """
    Find the neighbors of ``at`` whose pipes point back at it.

    Returns:
        (neighbor, direction from ``at`` to the neighbor) pairs, checked in
        the order N, S, W, E.
    """
    result: list[tuple[Coordinate, Direction]] = []
    for direction in (Direction.N, Direction.S, Direction.W, Direction.E):
        candidate = grid.neighbor(at, direction)
        if candidate is not None and connects(grid.get(candidate), direction.opposite):
            result.append((candidate, direction))
    return result


def shape_for(directions: Iterable[Direction]) -> str | None:
    """Return the pipe symbol connecting exactly ``directions``, or None if there is none."""
    return _SHAPES.get(frozenset(directions))
