"""Choose which proposed changes to apply.

Without an interactive terminal every choice is selected, so scripted
runs with ``--apply`` write everything they report.
"""
from __future__ import annotations

import logging
import sys
from typing import List, Optional

from rich.markup import escape
from rich.prompt import Prompt

from render import console

logger = logging.getLogger(__name__)


def is_interactive() -> bool:
    """True when both stdin and stdout are attached to a terminal."""
    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def parse_selection(answer: str, count: int) -> List[int]:
    """Turn ``"1,3-5"`` / ``"all"`` / ``""`` into zero-based indices.

    Out-of-range numbers and malformed pieces are ignored.
    """
    answer = (answer or "").strip().lower()
    if answer in ("a", "all", "*"):
        return list(range(count))
    picked = []
    for piece in answer.replace(" ", ",").split(","):
        if not piece:
            continue
        start, sep, end = piece.partition("-")
        try:
            first = int(start)
            last = int(end) if sep else first
        except ValueError:
            logger.debug("Ignoring selection piece %r", piece)
            continue
        for number in range(first, last + 1):
            if 1 <= number <= count and number - 1 not in picked:
                picked.append(number - 1)
    return sorted(picked)


def select_changes(choices: List[str], header: str, interactive: Optional[bool] = None) -> List[str]:
    """Return the subset of ``choices`` to apply.

    Args:
        choices: Human-readable change descriptions.
        header: Prompt heading.
        interactive: Force (or forbid) prompting; detected from the TTY when None.

    Returns:
        Selected descriptions in their original order; all of ``choices``
        when no interactive terminal is available.
    """
    if interactive is None:
        interactive = is_interactive()
    if not interactive:
        logger.info("No TTY; selecting all %d changes.", len(choices))
        return list(choices)

    console.print(header, style="bold")
    for number, choice in enumerate(choices, start=1):
        console.print(f"  [cyan]{number:>3}[/cyan]  {escape(choice)}", highlight=False)
    answer = Prompt.ask("Apply which? (e.g. 1,3-5, all, empty for none)", default="", console=console)
    return [choices[i] for i in parse_selection(answer, len(choices))]
