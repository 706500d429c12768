"""Tests for the pipe connectivity model."""

import pytest

from connectivity import (
    CONNECTIONS,
    ENTERABLE,
    connects,
    enterable,
    exit_direction,
    next_step,
    shape_for,
    start_neighbors,
)
from grid_parser import parse_grid
from pipe_types import Coordinate, Direction, PIPE_SYMBOLS

N, S, E, W = Direction.N, Direction.S, Direction.E, Direction.W

# .S-7.
# .|.|.
# .L-J.
SQUARE = parse_grid(b".S-7.\n.|.|.\n.L-J.\n")


class TestDirection:
    """Tests for Direction helpers."""

    def test_opposites(self) -> None:
        """Each direction has the expected opposite."""
        assert N.opposite is S
        assert S.opposite is N
        assert E.opposite is W
        assert W.opposite is E

    def test_opposite_is_involution(self) -> None:
        """Taking the opposite twice is a no-op."""
        for d in Direction:
            assert d.opposite.opposite is d


class TestCoordinateStep:
    """Tests for bounded neighbor lookup."""

    def test_step_inside(self) -> None:
        """Steps inside the grid return the neighbor."""
        at = Coordinate(1, 1)
        assert at.step(N, 3, 3) == Coordinate(1, 0)
        assert at.step(S, 3, 3) == Coordinate(1, 2)
        assert at.step(W, 3, 3) == Coordinate(0, 1)
        assert at.step(E, 3, 3) == Coordinate(2, 1)

    def test_step_off_top_left(self) -> None:
        """Moving off the top or left edge gives None, never a negative coordinate."""
        at = Coordinate(0, 0)
        assert at.step(N, 3, 3) is None
        assert at.step(W, 3, 3) is None

    def test_step_off_bottom_right(self) -> None:
        """Moving off the bottom or right edge gives None."""
        at = Coordinate(2, 2)
        assert at.step(S, 3, 3) is None
        assert at.step(E, 3, 3) is None


class TestConnectionTable:
    """Tests for the symbol table and what is derived from it."""

    def test_every_pipe_connects_two_sides(self) -> None:
        """Each of the six pipes has exactly two connectors."""
        assert set(CONNECTIONS) == set(PIPE_SYMBOLS)
        for sides in CONNECTIONS.values():
            assert len(sides) == 2

    def test_pipes_are_distinct(self) -> None:
        """No two pipes connect the same pair of sides."""
        assert len(set(CONNECTIONS.values())) == 6

    def test_enterable_sets(self) -> None:
        """Entering a tile needs a connector facing back the way we came."""
        assert ENTERABLE[N] == {"S", "|", "7", "F"}
        assert ENTERABLE[S] == {"S", "|", "L", "J"}
        assert ENTERABLE[E] == {"S", "-", "J", "7"}
        assert ENTERABLE[W] == {"S", "-", "L", "F"}

    def test_start_and_ground(self) -> None:
        """S is always enterable; ground never is."""
        for d in Direction:
            assert enterable("S", d)
            assert not enterable(".", d)

    def test_connects(self) -> None:
        """connects reads the table."""
        assert connects("L", N)
        assert connects("L", E)
        assert not connects("L", S)
        assert not connects(".", N)
        assert not connects("S", N)


class TestExitDirection:
    """Tests for the exit taken through each tile."""

    @pytest.mark.parametrize(
        "symbol, arrived_from, expected",
        [
            ("|", N, S),
            ("|", S, N),
            ("-", W, E),
            ("-", E, W),
            ("L", N, E),
            ("L", E, N),
            ("J", N, W),
            ("J", W, N),
            ("7", S, W),
            ("7", W, S),
            ("F", S, E),
            ("F", E, S),
        ],
    )
    def test_connected_arrivals(self, symbol: str, arrived_from: Direction, expected: Direction) -> None:
        """Arriving on one connector leaves through the other."""
        assert exit_direction(symbol, arrived_from) is expected

    @pytest.mark.parametrize("symbol", ["|", "-", "L", "J", "7", "F"])
    def test_unconnected_arrivals(self, symbol: str) -> None:
        """Arriving on a side without a connector has no exit."""
        for d in Direction:
            if d not in CONNECTIONS[symbol]:
                assert exit_direction(symbol, d) is None

    @pytest.mark.parametrize("symbol", ["S", ".", "I"])
    def test_non_pipes(self, symbol: str) -> None:
        """Start, ground and unknown symbols never continue."""
        for d in Direction:
            assert exit_direction(symbol, d) is None


class TestNextStep:
    """Tests for following a pipe one tile at a time."""

    def test_dash(self) -> None:
        """A dash passes straight through."""
        assert next_step(SQUARE, Coordinate(2, 0), W) == (Coordinate(3, 0), W)
        assert next_step(SQUARE, Coordinate(2, 0), E) == (Coordinate(1, 0), E)

    def test_j(self) -> None:
        """J turns between north and west."""
        assert next_step(SQUARE, Coordinate(3, 2), N) == (Coordinate(2, 2), E)
        assert next_step(SQUARE, Coordinate(3, 2), W) == (Coordinate(3, 1), S)

    def test_l(self) -> None:
        """L turns between north and east."""
        assert next_step(SQUARE, Coordinate(1, 2), N) == (Coordinate(2, 2), W)
        assert next_step(SQUARE, Coordinate(1, 2), E) == (Coordinate(1, 1), S)

    def test_pipe(self) -> None:
        """A vertical pipe passes straight through, including into S."""
        assert next_step(SQUARE, Coordinate(1, 1), N) == (Coordinate(1, 2), N)
        assert next_step(SQUARE, Coordinate(1, 1), S) == (Coordinate(1, 0), S)

    def test_seven(self) -> None:
        """7 turns between south and west."""
        assert next_step(SQUARE, Coordinate(3, 0), W) == (Coordinate(3, 1), N)
        assert next_step(SQUARE, Coordinate(3, 0), S) == (Coordinate(2, 0), E)

    def test_f(self) -> None:
        """F turns between south and east."""
        grid = parse_grid(b"..F7.\n.FJ|.\nSJ.L7\n|F--J\nLJ...")
        assert next_step(grid, Coordinate(2, 0), S) == (Coordinate(3, 0), W)
        assert next_step(grid, Coordinate(2, 0), E) == (Coordinate(2, 1), N)

    def test_wrong_arrival_side(self) -> None:
        """Arriving on a side the tile does not connect is a dead end."""
        assert next_step(SQUARE, Coordinate(1, 1), W) is None

    def test_exit_off_grid(self) -> None:
        """An exit leading off the grid is a dead end."""
        grid = parse_grid(b"S-\n..")
        assert next_step(grid, Coordinate(1, 0), W) is None

    def test_exit_into_incompatible_tile(self) -> None:
        """An exit into a tile with no connector facing back is a dead end."""
        grid = parse_grid(b"S-|")
        assert next_step(grid, Coordinate(1, 0), W) is None

    def test_ground(self) -> None:
        """Ground tiles never continue."""
        assert next_step(SQUARE, Coordinate(0, 0), N) is None


class TestStartNeighbors:
    """Tests for finding the pipes connected to a tile."""

    def test_square(self) -> None:
        """The start of the square connects south and east."""
        grid = parse_grid(b".....\n.S-7.\n.|.|.\n.L-J.\n.....")
        assert start_neighbors(grid, grid.start) == [
            (Coordinate(1, 2), S),
            (Coordinate(2, 1), E),
        ]

    def test_ignores_pipes_facing_away(self) -> None:
        """Neighboring pipes that do not point at the start are skipped."""
        grid = parse_grid(b"-L|F7\n7S-7|\nL|7||\n-L-J|\nL|-JF")
        assert start_neighbors(grid, grid.start) == [
            (Coordinate(1, 2), S),
            (Coordinate(2, 1), E),
        ]

    def test_corner_start(self) -> None:
        """A start in the corner only looks at in-bounds neighbors."""
        grid = parse_grid(b"S7\nLJ")
        assert start_neighbors(grid, grid.start) == [
            (Coordinate(0, 1), S),
            (Coordinate(1, 0), E),
        ]

    def test_isolated(self) -> None:
        """A start surrounded by ground has no neighbors."""
        grid = parse_grid(b"...\n.S.\n...")
        assert start_neighbors(grid, grid.start) == []


class TestShapeFor:
    """Tests for the reverse table lookup."""

    def test_round_trip(self) -> None:
        """Every pipe is found from its own connectors."""
        for symbol, sides in CONNECTIONS.items():
            assert shape_for(sides) == symbol

    def test_order_does_not_matter(self) -> None:
        """Direction pairs are unordered."""
        assert shape_for([N, E]) == "L"
        assert shape_for([E, N]) == "L"

    def test_no_such_pipe(self) -> None:
        """Sets that no pipe connects give None."""
        assert shape_for([N]) is None
        assert shape_for([N, S, E]) is None
        assert shape_for([]) is None
