"""``depsync upgrade``: move registry deps to their latest versions."""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

import render
from cli_config import Settings
from constants import ExitCodes
from registry import RegistryClient
from selection import select_changes
from versioning.coordinates import find_registry_coordinates
from versioning.diff import compute_upgrade_changes, summarize_by_library
from versioning.resolution import resolve_registry_libs
from workspace import find_dep_files, load_contents, relative, write_changes

logger = logging.getLogger(__name__)

Selector = Callable[[List[str], str], List[str]]


def _choice_label(row) -> str:
    return f"{row['library']:<40}  {row['old']} -> {row['new']}  ({', '.join(row['projects'])})"


def run_upgrade(
    settings: Settings,
    client: Optional[RegistryClient] = None,
    select: Optional[Selector] = None,
) -> int:
    """Check every registry dep against its registry and optionally upgrade.

    Returns:
        int: Process exit code.
    """
    root_dir = os.path.realpath(settings.root)
    contents = load_contents(find_dep_files(root_dir, settings.skip_dirs, settings.depth))

    libraries = sorted({c.library for content in contents for c in find_registry_coordinates(content.text)})
    render.heading("Checking latest versions...")
    render.info(f"  Checking {len(libraries)} unique libraries...")

    batch = resolve_registry_libs(
        libraries,
        allow_pre_release=settings.pre_release,
        client=client or RegistryClient(settings.registries),
        max_workers=settings.max_workers,
    )
    render.success(f"  Resolved {len(batch.resolved)} / {batch.attempted} libraries")
    if batch.failures:
        logger.info("Unresolved: %s", ", ".join(f"{lib} ({err.kind.value})" for lib, err in sorted(batch.failures.items())))

    upgrades = compute_upgrade_changes(contents, batch.resolved)
    if not upgrades:
        render.success("All registry deps are up to date.")
        return ExitCodes.SUCCESS.value

    rows = summarize_by_library(upgrades)
    render.warning(f"{len(upgrades)} upgrades available across {len(rows)} libraries:")
    render.show(render.upgrades_table(rows))

    if not settings.apply:
        render.info("Dry run. Pass --apply for interactive selection.")
        return ExitCodes.SUCCESS.value

    choices = [_choice_label(row) for row in rows]
    chooser = select or select_changes
    selected = chooser(choices, "Select upgrades to apply")
    if not selected:
        render.info("No upgrades selected.")
        return ExitCodes.SUCCESS.value

    selected_libs = {rows[choices.index(choice)]["library"] for choice in selected if choice in choices}
    chosen = [u for u in upgrades if u.library in selected_libs]
    written, failed = write_changes(root_dir, chosen)
    for path in written:
        render.success(f"  Updated {relative(root_dir, path)}")
    render.success(f"Applied {len(chosen)} upgrades across {len(written)} files.")
    if failed:
        render.error(f"{len(failed)} files could not be written.")
        return ExitCodes.FILE_ERROR.value
    return ExitCodes.SUCCESS.value
