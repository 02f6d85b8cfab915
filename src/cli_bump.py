"""``depsync bump``: release the project in ``--root``.

Bumps the VERSION file, commits it, tags ``v<version>`` and pushes, then
optionally runs ``sync --apply`` over the parent workspace so downstream
projects pick up the new tag.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Callable, Optional

import render
from cli_config import Settings
from cli_sync import run_sync
from constants import Constants, ExitCodes
from common.result import Ok
from repository.git_tags import run_git
from versioning.version import bump_version, format_tag, format_version, parse_semver
from workspace import read_text, write_text

logger = logging.getLogger(__name__)


def _git(project_dir: str, *args: str) -> bool:
    result = run_git(["-C", project_dir, *args], context=args[0])
    if not isinstance(result, Ok):
        render.warning(f"  git {args[0]}: {result.describe()}")
        return False
    return True


def run_bump(
    settings: Settings,
    part: Optional[str] = None,
    push: bool = True,
    sync: bool = False,
    git: Callable[..., bool] = _git,
) -> int:
    """Bump, commit, tag and push; returns the process exit code."""
    project_dir = os.path.realpath(settings.root)
    version_file = os.path.join(project_dir, Constants.VERSION_FILE)
    if not os.path.isfile(version_file):
        render.error(f"Error: VERSION file not found at {version_file}")
        return ExitCodes.FILE_ERROR.value

    current_str = read_text(version_file).strip()
    current = parse_semver(current_str)
    if current is None:
        render.error(f"Error: Cannot parse version '{current_str}'")
        return ExitCodes.FILE_ERROR.value

    bumped = bump_version(current, part or "patch")
    new_version = format_version(bumped)
    new_tag = format_tag(bumped)
    render.heading(f"Bumping {current_str} -> {new_version}")

    write_text(version_file, new_version + "\n")
    render.success(f"  Updated VERSION: {new_version}")

    ok = git(project_dir, "add", Constants.VERSION_FILE)
    ok = ok and git(project_dir, "commit", "-m", f"release: {new_tag}")
    ok = ok and git(project_dir, "tag", new_tag)
    if not ok:
        render.error("Release aborted; VERSION was updated but not fully committed/tagged.")
        return ExitCodes.EXIT_WARNINGS.value
    render.success(f"  Committed and tagged {new_tag}")

    if push:
        pushed = git(project_dir, "push") and git(project_dir, "push", "--tags")
        if pushed:
            render.success("  Pushed to remote")
        else:
            logger.warning("Push failed for %s", project_dir)

    if sync:
        if not settings.org:
            render.error("Error: --sync needs --org")
            return ExitCodes.USAGE_ERROR.value
        render.heading("Running sync...")
        parent = replace(settings, root=os.path.dirname(project_dir), apply=True)
        code = run_sync(parent)
        if code != ExitCodes.SUCCESS.value:
            return code

    render.success(f"Done: {new_tag}")
    return ExitCodes.SUCCESS.value
