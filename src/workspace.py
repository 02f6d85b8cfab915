"""Workspace discovery and whole-file text I/O for declaration files."""
from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional, Tuple

from constants import Constants
from versioning.diff import apply_changes, group_changes_by_path
from versioning.models import ChangeEntry, DeclarationFile, FileContent

logger = logging.getLogger(__name__)

def _skipped(root_dir: str, path: str, skip_dirs: Iterable[str]) -> bool:
    rel = os.path.relpath(path, root_dir).replace(os.sep, "/")
    return any(rel == skip or rel.startswith(skip.rstrip("/") + "/") for skip in skip_dirs)


def find_dep_files(
    root: str = ".",
    skip_dirs: Optional[Iterable[str]] = None,
    depth: int = Constants.DEFAULT_DEPTH,
) -> List[DeclarationFile]:
    """Find deps.edn and bb.edn files in a workspace.

    Args:
        root (str): Workspace root.
        skip_dirs (list, optional): Directory names relative to root to skip.
        depth (int): 0 scans only the root; otherwise each direct child
            directory of the root is scanned.

    Returns:
        list: Declaration files, directories sorted by name, deps.edn
        before bb.edn within a directory.
    """
    root_dir = os.path.realpath(root)
    skips = list(Constants.DEFAULT_SKIP_DIRS if skip_dirs is None else skip_dirs)

    if depth and depth > 0:
        try:
            children = sorted(os.listdir(root_dir))
        except OSError as e:
            logger.error("Unable to list workspace %s: %s", root_dir, e)
            return []
        scan_dirs = [
            os.path.join(root_dir, name) for name in children
            if os.path.isdir(os.path.join(root_dir, name))
            and not _skipped(root_dir, os.path.join(root_dir, name), skips)
        ]
    else:
        scan_dirs = [root_dir]

    found = []
    for directory in scan_dirs:
        for file_name in Constants.DEPS_FILES:
            path = os.path.join(directory, file_name)
            if os.path.isfile(path):
                found.append(DeclarationFile(path=path, project=os.path.basename(directory)))
    logger.debug("Found %d declaration files under %s", len(found), root_dir)
    return found


def read_text(path: str) -> str:
    """Read a whole file as UTF-8."""
    with open(path, encoding="utf-8", newline="") as handle:
        return handle.read()


def write_text(path: str, text: str) -> None:
    """Write a whole file as UTF-8, keeping newlines exactly as given."""
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def load_contents(dep_files: Iterable[DeclarationFile]) -> List[FileContent]:
    """Read every declaration file; unreadable files are logged and skipped."""
    contents = []
    for dep_file in dep_files:
        try:
            text = read_text(dep_file.path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Unable to read %s: %s", dep_file.path, e)
            continue
        contents.append(FileContent(path=dep_file.path, project=dep_file.project, text=text))
    return contents


def relative(root: str, path: str) -> str:
    """``path`` relative to ``root`` for display."""
    try:
        return os.path.relpath(path, os.path.realpath(root))
    except ValueError:
        return path


def write_changes(root: str, changes: Iterable[ChangeEntry]) -> Tuple[List[str], List[str]]:
    """Apply changes file by file: read whole, rewrite in memory, write whole.

    A file that cannot be read or written is logged and skipped; the other
    files are still updated.

    Returns:
        tuple: (written paths, failed paths)
    """
    written, failed = [], []
    for path, file_changes in group_changes_by_path(changes).items():
        try:
            original = read_text(path)
            updated = apply_changes(original, file_changes)
            if updated != original:
                write_text(path, updated)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Unable to update %s: %s", relative(root, path), e)
            failed.append(path)
            continue
        written.append(path)
    return written, failed
