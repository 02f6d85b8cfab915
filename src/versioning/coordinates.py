"""Find and rewrite dependency coordinates inside raw declaration text.

The text is never parsed into a tree and re-printed: every operation edits
the matched span in place, so comments and layout elsewhere in the file are
preserved byte for byte.

A coordinate is a library symbol followed by a flat map, e.g.::

    io.github.acme/events {:git/tag "v0.3.0" :git/sha "abc1234"}
    cheshire/cheshire {:mvn/version "5.13.0"}
    io.github.acme/dsl {:local/root "../dsl"}

Keys are accepted both namespaced (``:git/tag``) and dashed (``:git-tag``).
"""

import re
from typing import Callable, Iterator, List, Optional

from .models import CoordinateKind, DependencyCoordinate

_LIB = r"[\w.\-]+/[\w.\-]+"
_BOUNDARY_BEFORE = r"(?<![\w.\-/:])"
_BOUNDARY_AFTER = r"(?![\w.\-/])"
_MAP = r"(\s+)\{([^{}]*)\}"

_COORDINATE = re.compile(_BOUNDARY_BEFORE + r"(" + _LIB + r")" + _BOUNDARY_AFTER + _MAP)


def _key(namespace: str, name: str) -> "re.Pattern[str]":
    return re.compile(r"(:" + namespace + r"([/-])" + name + r"\s+\")([^\"]*)(\")")


_GIT_TAG = _key("git", "tag")
_GIT_SHA = _key("git", "sha")
_MVN_VERSION = _key("mvn", "version")
_LOCAL_ROOT = _key("local", "root")


def _iter_maps(text: str) -> Iterator["re.Match[str]"]:
    if not isinstance(text, str):
        return iter(())
    return _COORDINATE.finditer(text)


def _library_pattern(library: str) -> "re.Pattern[str]":
    return re.compile(_BOUNDARY_BEFORE + r"(" + re.escape(str(library)) + r")" + _BOUNDARY_AFTER + _MAP)


def _value(pattern: "re.Pattern[str]", body: str) -> Optional[str]:
    match = pattern.search(body)
    return match.group(3) if match else None


def find_git_coordinates(text: str) -> List[DependencyCoordinate]:
    """All ``lib {... :git/tag "..." ... :git/sha "..."}`` occurrences."""
    found = []
    for match in _iter_maps(text):
        body = match.group(3)
        tag = _value(_GIT_TAG, body)
        sha = _value(_GIT_SHA, body)
        if tag is None or sha is None:
            continue
        found.append(DependencyCoordinate(
            library=match.group(1),
            kind=CoordinateKind.GIT,
            tag=tag,
            sha=sha,
            match=match.group(0),
        ))
    return found


def find_registry_coordinates(text: str) -> List[DependencyCoordinate]:
    """All ``lib {:mvn/version "..."}`` occurrences."""
    found = []
    for match in _iter_maps(text):
        version = _value(_MVN_VERSION, match.group(3))
        if version is None:
            continue
        found.append(DependencyCoordinate(
            library=match.group(1),
            kind=CoordinateKind.REGISTRY,
            version=version,
            match=match.group(0),
        ))
    return found


def find_local_coordinates(text: str) -> List[DependencyCoordinate]:
    """All ``lib {:local/root "..."}`` occurrences."""
    found = []
    for match in _iter_maps(text):
        path = _value(_LOCAL_ROOT, match.group(3))
        if path is None:
            continue
        found.append(DependencyCoordinate(
            library=match.group(1),
            kind=CoordinateKind.LOCAL,
            path=path,
            match=match.group(0),
        ))
    return found


def find_coordinates(text: str) -> List[DependencyCoordinate]:
    """Every git, registry and local coordinate, in that order."""
    return find_git_coordinates(text) + find_registry_coordinates(text) + find_local_coordinates(text)


def _set_value(pattern: "re.Pattern[str]", body: str, value: str) -> str:
    return pattern.sub(lambda m: m.group(1) + value + m.group(4), body, count=1)


def _rewrite_maps(text: str, library: str, rewrite: Callable[[str], Optional[str]]) -> str:
    """Apply ``rewrite`` to the map body of every occurrence of ``library``.

    ``rewrite`` returns the new body, or None to leave the occurrence alone.
    """
    if not isinstance(text, str):
        return text

    def _replace(match: "re.Match[str]") -> str:
        body = rewrite(match.group(3))
        if body is None:
            return match.group(0)
        return match.group(1) + match.group(2) + "{" + body + "}"

    return _library_pattern(library).sub(_replace, text)


def update_git_coordinate(text: str, library: str, new_tag: str, new_sha: str) -> str:
    """Replace the tag and sha of ``library``'s git coordinate."""
    def _rewrite(body: str) -> Optional[str]:
        if _GIT_TAG.search(body) is None or _GIT_SHA.search(body) is None:
            return None
        return _set_value(_GIT_SHA, _set_value(_GIT_TAG, body, new_tag), new_sha)

    return _rewrite_maps(text, library, _rewrite)


def update_registry_coordinate(text: str, library: str, new_version: str) -> str:
    """Replace the version of ``library``'s registry coordinate."""
    def _rewrite(body: str) -> Optional[str]:
        if _MVN_VERSION.search(body) is None:
            return None
        return _set_value(_MVN_VERSION, body, new_version)

    return _rewrite_maps(text, library, _rewrite)


def _replace_local(text: str, library: str, build: Callable[[str], str]) -> str:
    """Swap the ``:local/root "..."`` pair for the pair ``build(separator)`` renders."""
    def _rewrite(body: str) -> Optional[str]:
        match = _LOCAL_ROOT.search(body)
        if match is None:
            return None
        return body[:match.start()] + build(match.group(2)) + body[match.end():]

    return _rewrite_maps(text, library, _rewrite)


def replace_local_with_git(text: str, library: str, tag: str, sha: str) -> str:
    """Turn ``library``'s local coordinate into a git tag+sha coordinate."""
    return _replace_local(
        text, library,
        lambda sep: f':git{sep}tag "{tag}" :git{sep}sha "{sha}"',
    )


def replace_local_with_registry(text: str, library: str, version: str) -> str:
    """Turn ``library``'s local coordinate into a registry version coordinate."""
    return _replace_local(
        text, library,
        lambda sep: f':mvn{sep}version "{version}"',
    )
