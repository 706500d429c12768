"""
ASCII rendering for analyzed pipe grids.

Draws the grid inside a titled box with loop pipes as box-drawing characters
and every other cell marked as enclosed (I) or exterior (O).
"""

from __future__ import annotations

from typing import Callable

from simple_chalk import chalk  # type: ignore[import-untyped]

from pipe_types import (
    HORIZONTAL,
    NORTH_EAST,
    NORTH_WEST,
    SOUTH_EAST,
    SOUTH_WEST,
    VERTICAL,
    CellClass,
    Coordinate,
    PipeGrid,
)
from pipeloop import PipeAnalysis

__all__ = ["BOX_DRAWING", "render_classified_grid", "render_analysis"]

BOX_DRAWING: dict[str, str] = {
    VERTICAL: "│",
    HORIZONTAL: "─",
    NORTH_EAST: "└",
    NORTH_WEST: "┘",
    SOUTH_WEST: "┐",
    SOUTH_EAST: "┌",
}

INSIDE_MARK = "I"
OUTSIDE_MARK = "O"


def _plain(s: str) -> str:
    return s


def render_classified_grid(
    grid: PipeGrid,
    cells: tuple[tuple[CellClass, ...], ...],
    title: str = "loop",
    cell_width: int = 1,
    box_drawing: bool = True,
    color: bool = True,
) -> list[str]:
    """
    Render a classified grid as lines of text.

    Args:
        grid: Grid with the start tile already resolved
        cells: One CellClass per cell, indexed [y][x]
        title: Label centered in the top border
        cell_width: Characters per cell (default 1)
        box_drawing: Draw loop pipes with box-drawing characters instead of
                     the raw symbols
        color: Apply ANSI colors (loop yellow, start highlighted, enclosed
               green, exterior blue)

    Returns:
        List of strings representing the rendered grid lines
    """
    loop_color: Callable[[str], str] = chalk.yellow if color else _plain
    inside_color: Callable[[str], str] = chalk.green if color else _plain
    outside_color: Callable[[str], str] = chalk.blue if color else _plain
    start_color: Callable[[str], str] = chalk.bgWhite.black if color else _plain

    grid_width = grid.width * cell_width + 2  # +2 for borders
    label = f" {title} "

    lines: list[str] = []

    # Top border with title
    if len(label) <= grid_width - 2:
        title_start = (grid_width - len(label)) // 2
        lines.append(
            "┌" +
            "─" * (title_start - 1) +
            label +
            "─" * (grid_width - title_start - len(label) - 1) +
            "┐"
        )
    else:
        lines.append("┌" + "─" * (grid_width - 2) + "┐")

    for y, row in enumerate(grid.rows):
        line_parts = ["│"]
        for x, symbol in enumerate(row):
            match cells[y][x]:
                case CellClass.LOOP:
                    char = BOX_DRAWING.get(symbol, symbol) if box_drawing else symbol
                    colorize = start_color if Coordinate(x, y) == grid.start else loop_color
                case CellClass.INSIDE:
                    char = INSIDE_MARK
                    colorize = inside_color
                case CellClass.OUTSIDE:
                    char = OUTSIDE_MARK
                    colorize = outside_color

            content = char if cell_width == 1 else char.center(cell_width)
            line_parts.append(colorize(content))
        line_parts.append("│")
        lines.append("".join(line_parts))

    # Bottom border
    lines.append("└" + "─" * (grid_width - 2) + "┘")

    return lines


def render_analysis(
    analysis: PipeAnalysis,
    title: str = "loop",
    cell_width: int = 1,
    box_drawing: bool = True,
    color: bool = True,
) -> str:
    """
    Render a PipeAnalysis to a string.

    Returns:
        Rendered grid, ANSI-colored unless ``color`` is False
    """
    lines = render_classified_grid(
        analysis.grid, analysis.cells, title, cell_width, box_drawing, color
    )
    return "\n".join(lines)
