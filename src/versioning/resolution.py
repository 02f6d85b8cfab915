"""Resolve the latest target coordinate for a library.

Two fallback chains, each expressed as an ordered list of steps handed to
``first_success``:

* git tags: GitHub remote, then the local clone under the workspace root;
* registry versions: Clojars, then Maven Central.

Batches are not atomic: every library is resolved on its own and failures
are collected next to the successes.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled
from common.result import Err, ErrorKind, Ok, Result, bind, first_success
from registry import RegistryClient
from repository.git_tags import GitTagSource

from .coordinates import find_git_coordinates
from .models import TagInfo, TagSource, lib_artifact_id, lib_group_artifact, lib_matches_org, parse_github_lib
from .version import is_pre_release, latest_tag

logger = logging.getLogger(__name__)


@dataclass
class BatchResolution:
    """Outcome of resolving many libraries independently."""
    resolved: Dict[str, object] = field(default_factory=dict)
    failures: Dict[str, Err] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.resolved) + len(self.failures)


def _select_latest(library: str, tags: List[TagInfo], source: TagSource) -> Result:
    latest = latest_tag(tags)
    if latest is None:
        return Err(ErrorKind.NO_SEMVER_TAGS, {"library": library, "source": source.value})
    return Ok(replace(latest, source=source))


def resolve_library_tag(
    library: str,
    local_clone_dir: str,
    tag_source: Optional[GitTagSource] = None,
) -> Result:
    """Latest semver tag of an ``io.github.<org>/<repo>`` library.

    Args:
        library: Qualified library name.
        local_clone_dir: Where a local clone of the library would live.
        tag_source: Tag listing collaborator; defaults to GitTagSource().

    Returns:
        Result: Ok(TagInfo) tagged with its source, or Err(NOT_GITHUB_LIB,
        NO_SEMVER_TAGS, NOT_FOUND, IO).
    """
    coords = parse_github_lib(library)
    if coords is None:
        return Err(ErrorKind.NOT_GITHUB_LIB, {"library": library})
    source = tag_source or GitTagSource()

    def _remote() -> Optional[Result]:
        listed = source.remote_tags(coords["org"], coords["repo"])
        if not isinstance(listed, Ok) or not listed.value:
            logger.debug("No remote tags for %s; trying local clone", library)
            return None
        return _select_latest(library, listed.value, TagSource.REMOTE)

    def _local() -> Optional[Result]:
        if not os.path.isdir(os.path.join(str(local_clone_dir), ".git")):
            return Err(ErrorKind.NOT_FOUND, {"library": library, "dir": str(local_clone_dir)})
        listed = source.local_tags(str(local_clone_dir))
        if not isinstance(listed, Ok):
            return Err(listed.kind, {**listed.context, "library": library})
        return _select_latest(library, listed.value, TagSource.LOCAL)

    return first_success(
        [_remote, _local],
        default=Err(ErrorKind.NOT_FOUND, {"library": library}),
    )


def resolve_registry_version(
    library: str,
    allow_pre_release: bool = False,
    client: Optional[RegistryClient] = None,
) -> Result:
    """Latest registry version of ``library``.

    Each registry is queried at most once, in order, until one answers.
    Pre-release filtering applies to the answer; it never sends the lookup
    on to the next registry.
    """
    registry_client = client or RegistryClient()
    group_id, artifact_id = lib_group_artifact(library)
    registries = registry_client.registries

    def _step(index: int, registry_id: str) -> Callable[[], Optional[Result]]:
        def _query() -> Optional[Result]:
            found = registry_client.lookup_latest(registry_id, group_id, artifact_id)
            if isinstance(found, Ok) or index == len(registries) - 1:
                return found
            logger.debug("%s lookup failed for %s: %s", registry_id, library, found.describe())
            return None
        return _query

    latest = first_success(
        [_step(i, reg) for i, reg in enumerate(registries)],
        default=Err(ErrorKind.NOT_FOUND, {"library": library}),
    )

    def _policy(version: str) -> Result:
        if not allow_pre_release and is_pre_release(version):
            return Err(ErrorKind.PRE_RELEASE, {"library": library, "version": version})
        return Ok(version)

    return bind(latest, _policy)


def resolve_batch(
    libraries: Iterable[str],
    resolve_one: Callable[[str], Result],
    max_workers: int = 1,
) -> BatchResolution:
    """Resolve each library independently and fold the outcomes.

    With ``max_workers`` above one the lookups run on a thread pool; the
    result map is only assembled once every lookup has finished.
    """
    ordered = list(dict.fromkeys(libraries))
    if max_workers and max_workers > 1 and len(ordered) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(resolve_one, ordered))
    else:
        outcomes = [resolve_one(lib) for lib in ordered]

    batch = BatchResolution()
    for library, outcome in zip(ordered, outcomes):
        if isinstance(outcome, Ok):
            batch.resolved[library] = outcome.value
        else:
            batch.failures[library] = outcome
            if is_debug_enabled(logger):
                logger.debug(
                    "Resolution failed",
                    extra=extra_context(
                        event="resolve",
                        component="resolution",
                        outcome=outcome.kind.value,
                        library=library
                    )
                )
    return batch


def discover_internal_libs(texts: Iterable[str], org: str) -> Dict[str, str]:
    """Map each ``io.github.<org>/*`` git library to its clone directory name."""
    libs: Dict[str, str] = {}
    for text in texts:
        for coordinate in find_git_coordinates(text):
            if lib_matches_org(org, coordinate.library):
                libs.setdefault(coordinate.library, lib_artifact_id(coordinate.library))
    return libs


def resolve_internal_libs(
    root_dir: str,
    internal_libs: Dict[str, str],
    tag_source: Optional[GitTagSource] = None,
    max_workers: int = 1,
) -> BatchResolution:
    """Resolve tags for every internal library; clones live under ``root_dir``."""
    source = tag_source or GitTagSource()
    return resolve_batch(
        sorted(internal_libs),
        lambda lib: resolve_library_tag(lib, os.path.join(root_dir, internal_libs[lib]), source),
        max_workers=max_workers,
    )


def resolve_registry_libs(
    libraries: Iterable[str],
    allow_pre_release: bool = False,
    client: Optional[RegistryClient] = None,
    max_workers: int = 1,
) -> BatchResolution:
    """Resolve the latest registry version of every library."""
    registry_client = client or RegistryClient()
    return resolve_batch(
        sorted(set(libraries)),
        lambda lib: resolve_registry_version(lib, allow_pre_release, registry_client),
        max_workers=max_workers,
    )
