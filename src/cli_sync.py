"""``depsync sync``: align internal git deps on their latest tags."""

from __future__ import annotations

import logging
import os
from typing import Optional

import render
from cli_config import Settings
from constants import Constants, ExitCodes
from repository.git_tags import GitTagSource
from versioning.diff import compute_sync_changes
from versioning.resolution import discover_internal_libs, resolve_internal_libs
from workspace import find_dep_files, load_contents, relative, write_changes

logger = logging.getLogger(__name__)


def run_sync(settings: Settings, tag_source: Optional[GitTagSource] = None) -> int:
    """Resolve every internal library and rewrite stale git coordinates.

    Returns:
        int: Process exit code.
    """
    if not settings.org:
        render.error("Error: --org is required for sync (e.g. --org acme)")
        return ExitCodes.USAGE_ERROR.value

    root_dir = os.path.realpath(settings.root)
    dep_files = find_dep_files(root_dir, settings.skip_dirs, settings.depth)
    contents = load_contents(dep_files)
    internal_libs = discover_internal_libs((c.text for c in contents), settings.org)

    render.heading(f"Resolving {Constants.GITHUB_LIB_PREFIX}{settings.org} tags ({len(internal_libs)} libs)...")
    batch = resolve_internal_libs(
        root_dir,
        internal_libs,
        tag_source or GitTagSource(),
        max_workers=settings.max_workers,
    )
    if batch.resolved:
        render.show(render.resolved_tags_table(batch.resolved))
    if batch.failures:
        render.warning(f"{len(batch.failures)} of {batch.attempted} libraries could not be resolved:")
        render.show(render.failures_table(batch.failures))
    logger.info("Resolved %d / %d internal libraries", len(batch.resolved), batch.attempted)

    render.heading(f"Scanning {len(dep_files)} dep files...")
    changes = compute_sync_changes(contents, batch.resolved)
    if not changes:
        render.success("All internal deps are in sync.")
        return ExitCodes.SUCCESS.value

    render.warning(f"{len(changes)} mismatches found:")
    render.show(render.changes_table(changes))

    if not settings.apply:
        render.info("Dry run. Pass --apply to write changes.")
        return ExitCodes.SUCCESS.value

    written, failed = write_changes(root_dir, changes)
    for path in written:
        render.success(f"  Updated {relative(root_dir, path)}")
    applied = [c for c in changes if c.path not in failed]
    render.success(f"Applied {len(applied)} changes.")
    if failed:
        render.error(f"{len(failed)} files could not be written.")
        return ExitCodes.FILE_ERROR.value
    return ExitCodes.SUCCESS.value
