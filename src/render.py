"""Terminal rendering with rich.

Colour is dropped automatically when stdout is not a terminal.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from common.result import Err
from versioning.models import ChangeEntry, TagInfo

console = Console(highlight=False)


def success(message: str) -> None:
    console.print(Text(message, style="green"))


def warning(message: str) -> None:
    console.print(Text(message, style="yellow"))


def error(message: str) -> None:
    console.print(Text(message, style="red"))


def info(message: str) -> None:
    console.print(Text(message, style="dim"))


def heading(message: str) -> None:
    console.print(Text(message, style="bold"))


def resolved_tags_table(resolved: Mapping[str, TagInfo]) -> Table:
    """Resolved tag per internal library, with provenance."""
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Library", style="cyan", no_wrap=True)
    table.add_column("Tag", style="green")
    table.add_column("Sha", style="dim")
    table.add_column("Source", style="dim")
    for library in sorted(resolved):
        tag = resolved[library]
        table.add_row(library, tag.tag, tag.short_sha or tag.sha,
                      tag.source.value if tag.source else "-")
    return table


def changes_table(changes: Iterable[ChangeEntry]) -> Table:
    """One row per change: project, library, old -> new."""
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Project", style="cyan")
    table.add_column("Library")
    table.add_column("Current", style="red")
    table.add_column("Target", style="green")
    for change in changes:
        table.add_row(change.project, change.library, change.old_label, change.new_label)
    return table


def upgrades_table(rows: Iterable[Dict[str, object]]) -> Table:
    """Upgrades grouped by library (see versioning.diff.summarize_by_library)."""
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Library", style="cyan", no_wrap=True)
    table.add_column("Current", style="red")
    table.add_column("Latest", style="green")
    table.add_column("Projects", style="dim")
    for row in rows:
        table.add_row(str(row["library"]), str(row["old"]), str(row["new"]),
                      ", ".join(row["projects"]))
    return table


def failures_table(failures: Mapping[str, Err]) -> Table:
    table = Table(show_header=True, header_style="bold yellow", box=None)
    table.add_column("Library", style="cyan", no_wrap=True)
    table.add_column("Reason", style="yellow")
    for library in sorted(failures):
        table.add_row(library, failures[library].describe())
    return table


def matrix_table(matrix: Mapping[str, Mapping[str, str]], projects: List[str],
                 drifted: Optional[Iterable[str]] = None) -> Table:
    """Library x project version matrix; drifting rows highlighted."""
    drift = set(drifted or [])
    table = Table(show_header=True, header_style="bold cyan", box=None)
    table.add_column("Library", no_wrap=True)
    for project in projects:
        table.add_column(project, overflow="ellipsis", max_width=13)
    for library, versions in matrix.items():
        style = "yellow" if library in drift else "dim"
        cells = [Text(versions.get(p, "-"), style=style if p in versions else "dim") for p in projects]
        table.add_row(library, *cells)
    return table


def show(renderable) -> None:
    console.print(renderable)
