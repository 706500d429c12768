"""
Grid parsing for pipe maps.

Turns a raw text buffer into a PipeGrid and locates the start tile.
"""

from __future__ import annotations

import logging

from pipe_types import START, AnalysisRules, Coordinate, MalformedInputError, PipeGrid

__all__ = ["parse_grid"]

logger = logging.getLogger(__name__)


def parse_grid(buffer: bytes | str, rules: AnalysisRules | None = None) -> PipeGrid:
    """
    Parse a pipe map into a PipeGrid.

    Format:
    - One grid row per line, rows separated by a single line feed
    - A trailing newline is optional; so is an unterminated last line
    - Tiles: | - L J 7 F (pipes), . (ground), S (start)
    - Any other character is kept as-is and behaves like ground

    The grid width is the length of the shortest row; longer rows are cut to
    that width so every row has the same length.

    Example:
        b".....\\n.S-7.\\n.|.|.\\n.L-J.\\n.....\\n"
        Creates a 5x5 grid with start at (1, 1).

    Args:
        buffer: Raw input, bytes or already-decoded text
        rules: AnalysisRules; controls whether a missing start is an error

    Returns:
        PipeGrid with rows and start coordinate

    Raises:
        MalformedInputError: If the buffer is empty, is not ASCII, or has no
            start tile while ``rules.require_start`` is set
    """
    if rules is None:
        rules = AnalysisRules()

    if not buffer:
        raise MalformedInputError("Empty input: expected at least one row of tiles")

    if isinstance(buffer, bytes):
        try:
            text = buffer.decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedInputError(
                f"Input is not ASCII\n"
                f"  Offending byte 0x{buffer[e.start]:02x} at offset {e.start}"
            ) from e
    else:
        text = buffer

    lines = text.split("\n")
    # Trailing newlines terminate the last row rather than starting new ones
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        raise MalformedInputError("Empty input: expected at least one row of tiles")

    width = min(len(line) for line in lines)
    if any(len(line) != width for line in lines):
        logger.info("parse_grid: ragged rows, truncating to width %d", width)
    rows = tuple(line[:width] for line in lines)

    start: Coordinate | None = None
    for y, row in enumerate(rows):
        x = row.find(START)
        if x >= 0:
            start = Coordinate(x, y)
            break

    if start is None:
        if rules.require_start:
            raise MalformedInputError(
                f"No start tile '{START}' found\n"
                f"  Grid: {width}x{len(rows)}\n"
                f"  Exactly one '{START}' must mark the tile the loop passes through"
            )
        logger.info("parse_grid: no start tile, falling back to (0, 0)")
        start = Coordinate(0, 0)

    logger.info("parse_grid: width=%d, height=%d, start=%s", width, len(rows), start)
    return PipeGrid(rows, start)
