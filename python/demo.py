"""
Command-line runner for the pipe loop analyzer.
Reads a pipe map file and reports the farthest loop distance and the enclosed cell count.

Usage: python demo.py [path] [--render] [--verbose] [--lenient]
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_analysis
from pipe_types import AnalysisRules, PipeMazeError
from pipeloop import PipeAnalysis, analyze_file

DEFAULT_INPUT = "input.txt"
KNOWN_FLAGS = {"--render", "--verbose", "--lenient"}
USAGE = "Usage: python demo.py [path] [--render] [--verbose] [--lenient]"


def build_report(analysis: PipeAnalysis, path: str, show_grid: bool = False) -> Panel:
    """Build the result panel for one analyzed file."""
    report = Text()
    report.append("Grid: ", style="bold")
    report.append(f"{analysis.grid.width}x{analysis.grid.height}, start at {analysis.grid.start}\n")
    report.append("Loop length: ", style="bold")
    report.append(f"{analysis.trace.length}\n\n")
    report.append("Farthest distance: ", style="bold cyan")
    report.append(f"{analysis.farthest_distance}\n")
    report.append("Enclosed cells: ", style="bold cyan")
    report.append(f"{analysis.enclosed_count}")

    if show_grid:
        report.append("\n\n")
        report.append(Text.from_ansi(render_analysis(analysis, title=path)))

    return Panel(report, title=f"Pipe Loop - {path}", border_style="green")


def main(argv: list[str] | None = None) -> int:
    """Run the analyzer; returns the process exit status."""
    args = sys.argv[1:] if argv is None else argv
    flags = {a for a in args if a.startswith("--")}
    paths = [a for a in args if not a.startswith("--")]
    path = paths[0] if paths else DEFAULT_INPUT
    console = Console()

    unknown = sorted(flags - KNOWN_FLAGS)
    if unknown:
        status = Text()
        status.append(f"Unknown option: {', '.join(unknown)}\n", style="bold red")
        status.append(USAGE)
        console.print(Panel(status, title="Pipe Loop - Error", border_style="red"))
        return 2

    if "--verbose" in flags:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    rules = AnalysisRules(require_start="--lenient" not in flags)

    try:
        analysis = analyze_file(path, rules)
    except FileNotFoundError:
        console.print(Panel(Text(f"File not found: {path}", style="bold red"), title="Pipe Loop - Error", border_style="red"))
        return 2
    except PipeMazeError as e:
        status = Text()
        status.append(f"{type(e).__name__}\n", style="bold red")
        status.append(str(e))
        console.print(Panel(status, title="Pipe Loop - Error", border_style="red"))
        return 1

    console.print(build_report(analysis, path, show_grid="--render" in flags))
    return 0


if __name__ == "__main__":
    sys.exit(main())
