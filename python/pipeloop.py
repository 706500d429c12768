"""
Pipe loop analysis.
Pipeline: parse -> trace the loop through S -> resolve the shape under S -> scan rows for enclosed cells.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable

from connectivity import next_step, shape_for, start_neighbors
from grid_parser import parse_grid
from pipe_types import (
    HORIZONTAL,
    NORTH_EAST,
    NORTH_WEST,
    SOUTH_EAST,
    SOUTH_WEST,
    VERTICAL,
    AmbiguousStartShapeError,
    AnalysisRules,
    BrokenLoopError,
    CellClass,
    Coordinate,
    Direction,
    PipeGrid,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Loop Tracing
# =============================================================================


@dataclass(frozen=True)
class LoopTrace:
    """The loop through the start tile."""

    path: tuple[Coordinate, ...]  # Start first, closure not repeated
    cells: frozenset[Coordinate]
    start_directions: tuple[Direction, Direction]  # Sides of the start tile the loop uses

    @property
    def start(self) -> Coordinate:
        return self.path[0]

    @property
    def length(self) -> int:
        return len(self.path)

    @property
    def farthest_distance(self) -> int:
        """Steps along the loop to the tile farthest from the start."""
        return self.length // 2


def _walk(grid: PipeGrid, first: Coordinate, direction: Direction) -> tuple[Coordinate, ...]:
    """
    Walk the loop from the start through ``first`` until it returns to the start.

    Args:
        grid: The grid being walked
        first: Neighbor of the start the walk begins with
        direction: Direction from the start to ``first``

    Returns:
        Visited coordinates, start first

    Raises:
        BrokenLoopError: If the pipe dead-ends or runs into itself before
            getting back to the start
    """
    start = grid.start
    path = [start, first]
    visited = {start, first}
    current = first
    arrived_from = direction.opposite

    while True:
        step = next_step(grid, current, arrived_from)
        if step is None:
            raise BrokenLoopError(
                f"Loop does not close\n"
                f"  Walk from {start} heading {direction.value} dead-ends at {current}\n"
                f"  Tile '{grid.get(current)}' entered from {arrived_from.value}\n"
                f"  Steps taken: {len(path) - 1}"
            )
        nxt, arrived_from = step
        if nxt == start:
            return tuple(path)
        if nxt in visited:
            raise BrokenLoopError(
                f"Loop crosses itself at {nxt} before returning to start {start}"
            )
        path.append(nxt)
        visited.add(nxt)
        current = nxt


def trace_loop(grid: PipeGrid, rules: AnalysisRules | None = None) -> LoopTrace:
    """
    Find the loop passing through the start tile.

    Args:
        grid: Parsed grid
        rules: AnalysisRules; ``verify_both_directions`` walks the loop the
            other way too and requires both walks to agree

    Returns:
        LoopTrace with the ordered cycle and its cell set

    Raises:
        AmbiguousStartShapeError: If the start does not have exactly two
            connected neighbors
        BrokenLoopError: If a walk fails to return to the start
    """
    if rules is None:
        rules = AnalysisRules()

    neighbors = start_neighbors(grid, grid.start)
    logger.debug(
        "trace_loop: start %s connects %s",
        grid.start,
        ", ".join(f"{d.value}->{c}" for c, d in neighbors),
    )
    if len(neighbors) != 2:
        raise AmbiguousStartShapeError(
            f"Start tile {grid.start} must connect to exactly 2 neighbors\n"
            f"  Found {len(neighbors)}: "
            + (", ".join(f"{d.value} {c} '{grid.get(c)}'" for c, d in neighbors) or "none")
        )

    (first, first_dir), (second, second_dir) = neighbors
    path = _walk(grid, first, first_dir)
    cells = frozenset(path)

    if rules.verify_both_directions:
        reverse = _walk(grid, second, second_dir)
        if len(reverse) != len(path) or frozenset(reverse) != cells:
            raise BrokenLoopError(
                f"Walks from start {grid.start} disagree\n"
                f"  Heading {first_dir.value}: {len(path)} tiles\n"
                f"  Heading {second_dir.value}: {len(reverse)} tiles"
            )

    logger.info("trace_loop: start=%s, length=%d", grid.start, len(path))
    return LoopTrace(path, cells, (first_dir, second_dir))


# =============================================================================
# Start Shape
# =============================================================================


def resolve_start_shape(directions: Iterable[Direction]) -> str:
    """
    Return the pipe symbol hidden under the start tile.

    Args:
        directions: The two sides of the start tile the loop passes through

    Raises:
        AmbiguousStartShapeError: If the sides are not exactly two distinct
            directions
    """
    directions = tuple(directions)
    shape = shape_for(directions) if len(directions) == 2 else None
    if shape is None:
        raise AmbiguousStartShapeError(
            f"No pipe connects {'/'.join(d.value for d in directions) or 'nothing'}\n"
            f"  Start shape needs exactly two distinct directions"
        )
    return shape


def resolve_grid(grid: PipeGrid, trace: LoopTrace) -> PipeGrid:
    """Return ``grid`` with the start tile replaced by its resolved pipe."""
    shape = resolve_start_shape(trace.start_directions)
    logger.debug("resolve_grid: start %s is '%s'", grid.start, shape)
    return grid.with_tile(grid.start, shape)


# =============================================================================
# Interior Scan
# =============================================================================


class ScanState(Enum):
    """
    Row scan state: parity so far, plus the elbow that opened the current
    horizontal run (L turns up, F turns down) while one is open.
    """

    OUTSIDE = (False, None)
    INSIDE = (True, None)
    OUTSIDE_AWAITING_CLOSE_UP = (False, NORTH_EAST)
    OUTSIDE_AWAITING_CLOSE_DOWN = (False, SOUTH_EAST)
    INSIDE_AWAITING_CLOSE_UP = (True, NORTH_EAST)
    INSIDE_AWAITING_CLOSE_DOWN = (True, SOUTH_EAST)

    @property
    def inside(self) -> bool:
        return self.value[0]

    @property
    def opener(self) -> str | None:
        return self.value[1]


# (opening elbow, closing elbow) -> whether the run crosses the row's ray
CORNER_PAIR_CROSSES: dict[tuple[str, str], bool] = {
    (NORTH_EAST, SOUTH_WEST): True,  # L-7
    (SOUTH_EAST, NORTH_WEST): True,  # F-J
    (NORTH_EAST, NORTH_WEST): False,  # L-J
    (SOUTH_EAST, SOUTH_WEST): False,  # F-7
}


def _build_transitions() -> dict[tuple[ScanState, str], ScanState]:
    states = {(s.inside, s.opener): s for s in ScanState}
    transitions: dict[tuple[ScanState, str], ScanState] = {}

    for inside in (False, True):
        resting = states[(inside, None)]
        flipped = states[(not inside, None)]
        transitions[(resting, VERTICAL)] = flipped
        for opener in (NORTH_EAST, SOUTH_EAST):
            awaiting = states[(inside, opener)]
            transitions[(resting, opener)] = awaiting
            transitions[(awaiting, HORIZONTAL)] = awaiting
            for closer in (SOUTH_WEST, NORTH_WEST):
                crosses = CORNER_PAIR_CROSSES[(opener, closer)]
                transitions[(awaiting, closer)] = flipped if crosses else resting

    return transitions


_TRANSITIONS = _build_transitions()


def classify_cells(grid: PipeGrid, trace: LoopTrace) -> tuple[tuple[CellClass, ...], ...]:
    """
    Classify every cell as part of the loop, inside it, or outside it.

    Each row is scanned left to right. Loop tiles drive the ScanState
    machine; every other tile takes the parity of the state it is reached in.
    The start tile is read through its resolved shape.

    Args:
        grid: Parsed grid (the start tile may still show S)
        trace: Loop found by trace_loop

    Returns:
        One CellClass per cell, indexed [y][x]

    Raises:
        BrokenLoopError: If a row's loop tiles do not form a closed boundary
    """
    return _scan_rows(resolve_grid(grid, trace), trace.cells)


def _scan_rows(
    resolved: PipeGrid, loop_cells: frozenset[Coordinate]
) -> tuple[tuple[CellClass, ...], ...]:
    """Run the row scan over a grid whose start tile is already resolved."""
    rows: list[tuple[CellClass, ...]] = []

    for y, row in enumerate(resolved.rows):
        state = ScanState.OUTSIDE
        classes: list[CellClass] = []
        for x, symbol in enumerate(row):
            at = Coordinate(x, y)
            if at in loop_cells:
                next_state = _TRANSITIONS.get((state, symbol))
                if next_state is None:
                    raise BrokenLoopError(
                        f"Unexpected loop tile '{symbol}' at {at}\n"
                        f"  Row scan state: {state.name}\n"
                        f"  Row {y}: \"{row}\""
                    )
                state = next_state
                classes.append(CellClass.LOOP)
            elif state.opener is not None:
                raise BrokenLoopError(
                    f"Horizontal run opened by '{state.opener}' is interrupted at {at}\n"
                    f"  Row {y}: \"{row}\""
                )
            else:
                classes.append(CellClass.INSIDE if state.inside else CellClass.OUTSIDE)
        if state is not ScanState.OUTSIDE:
            raise BrokenLoopError(
                f"Row {y} ends in state {state.name}; the loop is not closed across it\n"
                f"  Row {y}: \"{row}\""
            )
        rows.append(tuple(classes))

    return tuple(rows)


def count_enclosed(grid: PipeGrid, trace: LoopTrace) -> int:
    """Count the non-loop cells enclosed by the loop."""
    classes = classify_cells(grid, trace)
    count = sum(row.count(CellClass.INSIDE) for row in classes)
    logger.info("count_enclosed: %d of %d cells", count, grid.width * grid.height)
    return count


# =============================================================================
# Entry Points
# =============================================================================


@dataclass(frozen=True)
class PipeAnalysis:
    """Result of running the full pipeline on one input."""

    grid: PipeGrid  # Start tile resolved
    trace: LoopTrace
    cells: tuple[tuple[CellClass, ...], ...]

    @property
    def farthest_distance(self) -> int:
        return self.trace.farthest_distance

    @property
    def enclosed_count(self) -> int:
        return sum(row.count(CellClass.INSIDE) for row in self.cells)

    @property
    def exterior_count(self) -> int:
        return sum(row.count(CellClass.OUTSIDE) for row in self.cells)


def analyze(buffer: bytes | str, rules: AnalysisRules | None = None) -> PipeAnalysis:
    """
    Parse ``buffer``, trace its loop and classify every cell.

    Raises:
        MalformedInputError: If the buffer cannot be parsed
        AmbiguousStartShapeError: If the start tile has no single pipe shape
        BrokenLoopError: If the loop does not close
    """
    grid = parse_grid(buffer, rules)
    trace = trace_loop(grid, rules)
    resolved = resolve_grid(grid, trace)
    return PipeAnalysis(resolved, trace, _scan_rows(resolved, trace.cells))


def analyze_file(path: str | Path, rules: AnalysisRules | None = None) -> PipeAnalysis:
    """Read ``path`` as bytes and analyze it."""
    return analyze(Path(path).read_bytes(), rules)


def farthest_distance(buffer: bytes | str, rules: AnalysisRules | None = None) -> int:
    """Number of steps along the loop from the start to the farthest tile."""
    grid = parse_grid(buffer, rules)
    return trace_loop(grid, rules).farthest_distance


def enclosed_count(buffer: bytes | str, rules: AnalysisRules | None = None) -> int:
    """Number of cells enclosed by the loop."""
    grid = parse_grid(buffer, rules)
    return count_enclosed(grid, trace_loop(grid, rules))
