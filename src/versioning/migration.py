"""Turn machine-local path coordinates into remote ones.

Internal ``io.github.<org>/<repo>`` libraries become git tag+sha
coordinates; everything else becomes a registry version. A library whose
resolution fails keeps its local coordinate and is reported.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from common.result import Err, Ok, Result
from constants import Constants
from registry import RegistryClient
from repository.git_tags import GitTagSource

from .coordinates import find_local_coordinates, replace_local_with_git, replace_local_with_registry
from .models import CoordinateKind, DependencyCoordinate, lib_artifact_id, parse_github_lib
from .resolution import resolve_library_tag, resolve_registry_version

OVERLAY_HEADER = (
    ";; {name}: machine-specific overrides, do not commit\n"
    ";; Generated by depsync lint --fix\n"
    ";;\n"
    ";; clj:  clj -Sdeps \"$(cat {name})\"\n"
    ";; bb:   copy the :local/root entries into a bb.edn alias\n"
)


@dataclass(frozen=True)
class MigrationOutcome:
    """What happened to one local coordinate."""
    library: str
    local_path: str
    kind: Optional[CoordinateKind] = None
    target: Optional[str] = None
    error: Optional[Err] = None

    @property
    def migrated(self) -> bool:
        return self.error is None and self.kind is not None


@dataclass
class MigrationResult:
    """Rewritten text plus one outcome per local library."""
    text: str
    outcomes: List[MigrationOutcome] = field(default_factory=list)

    @property
    def replaced(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.migrated)

    @property
    def failed(self) -> List[MigrationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.migrated]


def migrate_local_coordinates(
    text: str,
    root_dir: str,
    tag_source: Optional[GitTagSource] = None,
    client: Optional[RegistryClient] = None,
    resolve_tag: Optional[Callable[[str], Result]] = None,
    resolve_version: Optional[Callable[[str], Result]] = None,
) -> MigrationResult:
    """Replace every local coordinate in ``text`` that can be resolved.

    Args:
        text: Declaration file text.
        root_dir: Workspace root; internal libraries are cloned beneath it.
        tag_source: Git tag collaborator for internal libraries.
        client: Registry collaborator for external libraries.
        resolve_tag: Override for the internal-library resolver.
        resolve_version: Override for the registry resolver.
    """
    if resolve_tag is None:
        def resolve_tag(lib: str) -> Result:
            return resolve_library_tag(lib, os.path.join(root_dir, lib_artifact_id(lib)), tag_source)
    if resolve_version is None:
        def resolve_version(lib: str) -> Result:
            return resolve_registry_version(lib, allow_pre_release=False, client=client)

    result = MigrationResult(text=text)
    seen = set()
    for coordinate in find_local_coordinates(text):
        if coordinate.library in seen:
            continue
        seen.add(coordinate.library)

        if parse_github_lib(coordinate.library) is not None:
            resolved = resolve_tag(coordinate.library)
            if isinstance(resolved, Ok):
                sha = resolved.value.short_sha or resolved.value.sha
                result.text = replace_local_with_git(result.text, coordinate.library, resolved.value.tag, sha)
                outcome = MigrationOutcome(coordinate.library, coordinate.path, CoordinateKind.GIT,
                                           f"{resolved.value.tag} {sha}")
            else:
                outcome = MigrationOutcome(coordinate.library, coordinate.path, error=resolved)
        else:
            resolved = resolve_version(coordinate.library)
            if isinstance(resolved, Ok):
                result.text = replace_local_with_registry(result.text, coordinate.library, resolved.value)
                outcome = MigrationOutcome(coordinate.library, coordinate.path, CoordinateKind.REGISTRY,
                                           resolved.value)
            else:
                outcome = MigrationOutcome(coordinate.library, coordinate.path, error=resolved)
        result.outcomes.append(outcome)
    return result


def render_local_overlay(locals_: Iterable[DependencyCoordinate], name: str = Constants.LOCAL_OVERLAY_FILE) -> str:
    """Overlay file collecting the original ``:local/root`` paths."""
    entries: Dict[str, str] = {}
    for coordinate in locals_:
        entries.setdefault(coordinate.library, coordinate.path)
    lines = [f'{lib} {{:local/root "{path}"}}' for lib, path in entries.items()]
    body = "\n        ".join(lines)
    return OVERLAY_HEADER.format(name=name) + "\n{:deps {" + body + "}}\n"


def ensure_gitignore_entry(text: str, entry: str) -> str:
    """``.gitignore`` text with ``entry`` on its own line."""
    text = text or ""
    if any(line.strip() == entry for line in text.splitlines()):
        return text
    if text and not text.endswith("\n"):
        text += "\n"
    return text + entry + "\n"
