"""Compare declared coordinates against resolved targets.

Pure functions over already-read file text and already-resolved targets;
no I/O happens here, so the change set can be computed and inspected
without touching the network or the filesystem.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Union

from .coordinates import find_git_coordinates, find_registry_coordinates, update_git_coordinate, update_registry_coordinate
from .models import ChangeEntry, CoordinateKind, FileContent, TagInfo
from .version import is_newer, pick_sha, sha_matches

ResolvedTarget = Union[TagInfo, str]


def dedupe_changes(changes: Iterable[ChangeEntry]) -> List[ChangeEntry]:
    """Keep the first change per (path, library), preserving order."""
    seen = set()
    unique = []
    for change in changes:
        key = (change.path, change.library)
        if key in seen:
            continue
        seen.add(key)
        unique.append(change)
    return unique


def compute_sync_changes(files: Iterable[FileContent], resolved: Mapping[str, TagInfo]) -> List[ChangeEntry]:
    """Git coordinates whose tag or sha differs from the resolved tag."""
    changes = []
    for content in files:
        for coordinate in find_git_coordinates(content.text):
            info = resolved.get(coordinate.library)
            if not isinstance(info, TagInfo):
                continue
            target_sha = pick_sha(coordinate.sha, info)
            if coordinate.tag == info.tag and sha_matches(coordinate.sha, target_sha):
                continue
            changes.append(ChangeEntry(
                path=content.path,
                project=content.project,
                library=coordinate.library,
                kind=CoordinateKind.GIT,
                old_tag=coordinate.tag,
                old_sha=coordinate.sha,
                new_tag=info.tag,
                new_sha=target_sha,
            ))
    return dedupe_changes(changes)


def compute_registry_changes(
    files: Iterable[FileContent],
    resolved: Mapping[str, str],
    newer_only: bool = False,
) -> List[ChangeEntry]:
    """Registry coordinates whose version differs from the resolved one.

    With ``newer_only`` a differing but older resolved version is skipped.
    """
    changes = []
    for content in files:
        for coordinate in find_registry_coordinates(content.text):
            latest = resolved.get(coordinate.library)
            if not isinstance(latest, str):
                continue
            if coordinate.version == latest:
                continue
            if newer_only and not is_newer(coordinate.version, latest):
                continue
            changes.append(ChangeEntry(
                path=content.path,
                project=content.project,
                library=coordinate.library,
                kind=CoordinateKind.REGISTRY,
                old_version=coordinate.version,
                new_version=latest,
            ))
    return dedupe_changes(changes)


def compute_upgrade_changes(files: Iterable[FileContent], resolved: Mapping[str, str]) -> List[ChangeEntry]:
    """Registry upgrades; never suggests a downgrade."""
    return compute_registry_changes(files, resolved, newer_only=True)


def compute_changes(files: Iterable[FileContent], resolved: Mapping[str, ResolvedTarget]) -> List[ChangeEntry]:
    """Both change kinds, git first, deduplicated by (path, library)."""
    files = list(files)
    tags = {lib: target for lib, target in resolved.items() if isinstance(target, TagInfo)}
    versions = {lib: target for lib, target in resolved.items() if isinstance(target, str)}
    return dedupe_changes(compute_sync_changes(files, tags) + compute_registry_changes(files, versions))


def apply_changes(text: str, changes: Iterable[ChangeEntry]) -> str:
    """Fold every change for one file into its text."""
    for change in changes:
        if change.kind == CoordinateKind.GIT:
            text = update_git_coordinate(text, change.library, change.new_tag, change.new_sha)
        elif change.kind == CoordinateKind.REGISTRY:
            text = update_registry_coordinate(text, change.library, change.new_version)
    return text


def group_changes_by_path(changes: Iterable[ChangeEntry]) -> "OrderedDict[str, List[ChangeEntry]]":
    """Changes bucketed per file, files in first-seen order."""
    grouped: "OrderedDict[str, List[ChangeEntry]]" = OrderedDict()
    for change in changes:
        grouped.setdefault(change.path, []).append(change)
    return grouped


def summarize_by_library(changes: Iterable[ChangeEntry]) -> List[Dict[str, object]]:
    """One row per library: old/new label of its first change plus all projects."""
    rows: "OrderedDict[str, Dict[str, object]]" = OrderedDict()
    for change in changes:
        row = rows.get(change.library)
        if row is None:
            row = {
                "library": change.library,
                "old": change.old_label,
                "new": change.new_label,
                "projects": [],
            }
            rows[change.library] = row
        row["projects"].append(change.project)
    return [rows[lib] for lib in sorted(rows)]
