"""Version parsing, ordering and tag selection.

Everything here is a pure function of its arguments and total over its
input: unparseable versions yield ``None`` or an empty segment list rather
than an exception.
"""

import re
from typing import Iterable, List, Optional, Tuple

import semantic_version

from constants import Constants
from .models import TagInfo

SemVer = Tuple[int, int, int]

_SEMVER = re.compile(r"v?(\d+)\.(\d+)\.(\d+).*", re.DOTALL)
_PRE_RELEASE = re.compile("|".join(Constants.PRE_RELEASE_MARKERS), re.IGNORECASE)
_NON_SEGMENT = re.compile(r"[^0-9.]")


def parse_semver(tag: Optional[str]) -> Optional[SemVer]:
    """Parse a tag like ``v0.4.0`` into (major, minor, patch).

    Anything after the third numeric group is ignored.
    """
    if not isinstance(tag, str):
        return None
    match = _SEMVER.fullmatch(tag)
    if not match:
        return None
    try:
        return int(match.group(1)), int(match.group(2)), int(match.group(3))
    except ValueError:
        return None


def is_pre_release(version: Optional[str]) -> bool:
    """True if the version carries a pre-release marker (alpha, rc, ...)."""
    if not version:
        return False
    return _PRE_RELEASE.search(str(version)) is not None


def is_stable(version: Optional[str]) -> bool:
    """Complement of is_pre_release."""
    return not is_pre_release(version)


def parse_version_segments(version: Optional[str]) -> List[int]:
    """Split a loosely structured version into its numeric segments.

    Non-numeric characters act as separators, so ``1.2.3-SNAPSHOT`` gives
    [1, 2, 3] and ``2024.01.15_1`` gives [2024, 1, 15, 1].
    """
    if version is None:
        return []
    segments = []
    for piece in _NON_SEGMENT.sub(".", str(version)).split("."):
        if not piece:
            continue
        try:
            segments.append(int(piece))
        except ValueError:
            segments.append(0)
    return segments


def _padded(a: List[int], b: List[int]) -> Tuple[List[int], List[int]]:
    width = max(len(a), len(b))
    return a + [0] * (width - len(a)), b + [0] * (width - len(b))


def compare_versions(a: Optional[str], b: Optional[str]) -> int:
    """Compare two versions segment-wise; returns -1, 0 or 1."""
    left, right = _padded(parse_version_segments(a), parse_version_segments(b))
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def is_newer(old: Optional[str], new: Optional[str]) -> bool:
    """True only if ``new`` is strictly newer than ``old``."""
    return compare_versions(new, old) > 0


def latest_tag(tags: Iterable[TagInfo]) -> Optional[TagInfo]:
    """Pick the highest semver tag; tags that do not parse are ignored."""
    best = None
    best_key = None
    for info in tags:
        key = parse_semver(info.tag)
        if key is None:
            continue
        if best_key is None or key > best_key:
            best, best_key = info, key
    return best


def sha_matches(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two shas over their shared length.

    A 7-character short sha matches the full sha it abbreviates. Empty or
    missing shas never match.
    """
    if not isinstance(a, str) or not isinstance(b, str) or not a or not b:
        return False
    length = min(len(a), len(b))
    return a[:length] == b[:length]


def pick_sha(old_sha: Optional[str], resolved: TagInfo) -> str:
    """Keep the sha length convention the declaration already uses."""
    if len(old_sha or "") <= Constants.SHORT_SHA_MAX_LEN:
        return resolved.short_sha or resolved.sha
    return resolved.sha


def bump_version(current: SemVer, part: str = "patch") -> SemVer:
    """Return the next version after ``current`` for ``part``.

    Args:
        current: (major, minor, patch) triple.
        part: One of "major", "minor" or "patch".

    Raises:
        ValueError: If ``part`` is not a known version part.
    """
    base = semantic_version.Version(major=current[0], minor=current[1], patch=current[2])
    bumpers = {
        "major": base.next_major,
        "minor": base.next_minor,
        "patch": base.next_patch,
    }
    if part not in bumpers:
        raise ValueError(f"Unknown version part: {part}")
    bumped = bumpers[part]()
    return bumped.major, bumped.minor, bumped.patch


def format_version(semver: SemVer) -> str:
    """Render a triple as ``1.2.3``."""
    return ".".join(str(n) for n in semver)


def format_tag(semver: SemVer) -> str:
    """Render a triple as a ``v1.2.3`` tag."""
    return "v" + format_version(semver)
