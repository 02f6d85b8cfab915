"""Data models for dependency coordinates, tags and change sets."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from constants import Constants


class TagSource(Enum):
    """Where a resolved tag came from."""
    REMOTE = "remote"
    LOCAL = "local"


class CoordinateKind(Enum):
    """Shape of a dependency coordinate in a declaration file."""
    GIT = "git"
    REGISTRY = "registry"
    LOCAL = "local"


@dataclass(frozen=True)
class TagInfo:
    """A tag and the commit it points at."""
    tag: str
    sha: str
    short_sha: Optional[str] = None
    source: Optional[TagSource] = None


@dataclass(frozen=True)
class DependencyCoordinate:
    """One occurrence of a library coordinate inside a declaration file."""
    library: str  # qualified group/artifact
    kind: CoordinateKind
    tag: Optional[str] = None
    sha: Optional[str] = None
    version: Optional[str] = None
    path: Optional[str] = None
    match: str = ""


@dataclass(frozen=True)
class DeclarationFile:
    """A declaration file to scan, labelled with the project that owns it."""
    path: str
    project: str


@dataclass(frozen=True)
class FileContent:
    """A declaration file together with its already-read text."""
    path: str
    project: str
    text: str


@dataclass(frozen=True)
class ChangeEntry:
    """A single attributable change to one library in one file."""
    path: str
    project: str
    library: str
    kind: CoordinateKind
    old_tag: Optional[str] = None
    old_sha: Optional[str] = None
    new_tag: Optional[str] = None
    new_sha: Optional[str] = None
    old_version: Optional[str] = None
    new_version: Optional[str] = None

    @property
    def old_label(self) -> str:
        if self.kind == CoordinateKind.GIT:
            return f"{self.old_tag} {self.old_sha}"
        return str(self.old_version)

    @property
    def new_label(self) -> str:
        if self.kind == CoordinateKind.GIT:
            return f"{self.new_tag} {self.new_sha}"
        return str(self.new_version)


_GITHUB_LIB = re.compile(r"io\.github\.([^/]+)/(.+)")


def parse_github_lib(library: str) -> Optional[Dict[str, str]]:
    """Parse ``io.github.<org>/<repo>`` into {"org", "repo"}; None otherwise."""
    if not isinstance(library, str):
        return None
    match = _GITHUB_LIB.fullmatch(library)
    if not match:
        return None
    return {"org": match.group(1), "repo": match.group(2)}


def lib_matches_org(org: str, library: str) -> bool:
    """True if ``library`` lives under the GitHub organisation ``org``."""
    return str(library).startswith(f"{Constants.GITHUB_LIB_PREFIX}{org}/")


def lib_artifact_id(library: str) -> str:
    """Artifact part of a qualified ``group/artifact`` library name."""
    return str(library).split("/")[-1]


def lib_group_artifact(library: str):
    """Split ``group/artifact``; an unqualified name is its own group."""
    group, _, artifact = str(library).partition("/")
    if not artifact:
        return group, group
    return group, artifact
