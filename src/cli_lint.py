"""``depsync lint``: flag machine-local ``:local/root`` deps, optionally fix them.

``--fix`` writes the original paths to a per-project overlay file (never
overwriting an existing one), adds that file to the project's .gitignore
and swaps each local coordinate for a resolved remote one.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import render
from cli_config import Settings
from constants import Constants, ExitCodes
from registry import RegistryClient
from repository.git_tags import GitTagSource
from versioning.coordinates import find_local_coordinates
from versioning.migration import ensure_gitignore_entry, migrate_local_coordinates, render_local_overlay
from workspace import find_dep_files, load_contents, read_text, relative, write_text

logger = logging.getLogger(__name__)


def _write_overlay(root_dir: str, project_dir: str, locals_) -> None:
    overlay_path = os.path.join(project_dir, Constants.LOCAL_OVERLAY_FILE)
    if os.path.exists(overlay_path):
        render.warning(f"  Skipped {relative(root_dir, overlay_path)} (already exists, merge manually)")
        return
    write_text(overlay_path, render_local_overlay(locals_))
    render.success(f"  Created {relative(root_dir, overlay_path)}")


def _ignore_overlay(root_dir: str, project_dir: str) -> None:
    gitignore = os.path.join(project_dir, Constants.GITIGNORE_FILE)
    current = read_text(gitignore) if os.path.exists(gitignore) else ""
    updated = ensure_gitignore_entry(current, Constants.LOCAL_OVERLAY_FILE)
    if updated != current:
        write_text(gitignore, updated)
        render.success(f"  Added '{Constants.LOCAL_OVERLAY_FILE}' to {relative(root_dir, gitignore)}")


def run_lint(
    settings: Settings,
    fix: bool = False,
    tag_source: Optional[GitTagSource] = None,
    client: Optional[RegistryClient] = None,
) -> int:
    """Report local coordinates; with ``fix`` migrate them.

    Returns:
        int: Process exit code; EXIT_WARNINGS when local deps remain.
    """
    root_dir = os.path.realpath(settings.root)
    contents = load_contents(find_dep_files(root_dir, settings.skip_dirs, settings.depth))
    render.heading("Linting dep files for anti-patterns...")

    flagged = [(content, find_local_coordinates(content.text)) for content in contents]
    flagged = [(content, locals_) for content, locals_ in flagged if locals_]
    total = sum(len(locals_) for _, locals_ in flagged)
    if not total:
        render.success("No anti-patterns found. All clean!")
        return ExitCodes.SUCCESS.value

    render.warning(f"WARNING: {total} :local/root dep(s) found in committed dep files")
    render.info("  :local/root pins deps to machine-specific paths, which breaks CI and other machines.")
    render.info(f"  Move local overrides to {Constants.LOCAL_OVERLAY_FILE} (gitignored) instead.")
    for content, locals_ in flagged:
        for coordinate in locals_:
            render.console.print(f"  [cyan]{content.project:<25}[/cyan] {coordinate.library:<35} [yellow]{coordinate.path}[/yellow]",
                                 highlight=False)

    if not fix:
        render.info(f"  Pass --fix to split into {Constants.LOCAL_OVERLAY_FILE} and resolve remote coords.")
        return ExitCodes.EXIT_WARNINGS.value

    render.heading("Fixing: splitting :local/root deps...")
    source = tag_source or GitTagSource()
    registry_client = client or RegistryClient(settings.registries)
    remaining = 0
    failed_writes = 0
    for content, locals_ in flagged:
        project_dir = os.path.dirname(content.path)
        try:
            _write_overlay(root_dir, project_dir, locals_)
            _ignore_overlay(root_dir, project_dir)
        except OSError as e:
            logger.error("Unable to write overlay for %s: %s", content.project, e)
            failed_writes += 1

        result = migrate_local_coordinates(content.text, root_dir, source, registry_client)
        for outcome in result.outcomes:
            if outcome.migrated:
                render.console.print(f"  [cyan]{outcome.library}[/cyan] -> [green]{outcome.target}[/green]",
                                     highlight=False)
            else:
                remaining += 1
                render.warning(f"  Could not resolve {outcome.library} ({outcome.error.describe()}); "
                               "remove :local/root manually")
        if result.replaced:
            try:
                write_text(content.path, result.text)
            except OSError as e:
                logger.error("Unable to update %s: %s", content.path, e)
                failed_writes += 1
                continue
            render.success(f"  Updated {relative(root_dir, content.path)}")

    if failed_writes:
        return ExitCodes.FILE_ERROR.value
    if remaining:
        return ExitCodes.EXIT_WARNINGS.value
    render.success("Done. Review the changes and commit.")
    return ExitCodes.SUCCESS.value
