"""Git tag listing for local clones and GitHub remotes.

Thin wrappers around ``git tag`` and ``git ls-remote``. Subprocess failures,
missing binaries and timeouts are returned as ``Err(ErrorKind.IO)`` values;
nothing here raises for an unreachable repository.
"""
from __future__ import annotations

import logging
import subprocess
from typing import List, Optional, Sequence

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, Timer
from common.result import Err, ErrorKind, Ok, Result
from versioning.models import TagInfo

logger = logging.getLogger(__name__)

_PEELED_SUFFIX = "^{}"
_TAG_REF_PREFIX = "refs/tags/"


def run_git(args: Sequence[str], context: str, timeout: Optional[float] = None) -> Result:
    """Run git and return Ok(stdout) or Err(IO) with the exit code."""
    cmd = ["git", *args]
    with Timer() as t:
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout or Constants.GIT_TIMEOUT,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug("git %s timed out", context)
            return Err(ErrorKind.IO, {"command": context, "error": "timeout"})
        except OSError as exc:
            logger.debug("git %s could not be started: %s", context, exc)
            return Err(ErrorKind.IO, {"command": context, "error": str(exc)})

    if is_debug_enabled(logger):
        logger.debug(
            "git finished",
            extra=extra_context(
                event="subprocess",
                component="git_tags",
                action=context,
                exit_code=proc.returncode,
                duration_ms=t.duration_ms(),
            )
        )
    if proc.returncode != 0:
        return Err(ErrorKind.IO, {
            "command": context,
            "exit_code": proc.returncode,
            "stderr": (proc.stderr or "").strip(),
        })
    return Ok(proc.stdout or "")


def parse_local_tag_lines(output: str) -> List[TagInfo]:
    """Parse ``<tag> <objectname> [<peeled objectname>]`` lines.

    Annotated tags report the commit they point at through the peeled
    object name; lightweight tags only have the first one.
    """
    tags = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        sha = parts[2] if len(parts) > 2 and parts[2] else parts[1]
        tags.append(TagInfo(tag=parts[0], sha=sha, short_sha=sha[:Constants.SHORT_SHA_LEN]))
    return tags


def parse_remote_tag_lines(output: str) -> List[TagInfo]:
    """Parse ``git ls-remote --tags`` output, preferring peeled commit shas."""
    order: List[str] = []
    shas = {}
    peeled = {}
    for line in output.splitlines():
        if "\t" not in line:
            continue
        sha, ref = line.split("\t", 1)
        sha, ref = sha.strip(), ref.strip()
        if not sha or not ref.startswith(_TAG_REF_PREFIX):
            continue
        tag = ref[len(_TAG_REF_PREFIX):]
        if tag.endswith(_PEELED_SUFFIX):
            peeled[tag[:-len(_PEELED_SUFFIX)]] = sha
            continue
        if tag not in shas:
            order.append(tag)
        shas[tag] = sha
    tags = []
    for tag in order:
        sha = peeled.get(tag, shas[tag])
        tags.append(TagInfo(tag=tag, sha=sha, short_sha=sha[:Constants.SHORT_SHA_LEN]))
    return tags


def list_local_tags(repo_path: str, timeout: Optional[float] = None) -> Result:
    """List ``v*`` tags of a local clone, newest first. Result[List[TagInfo]]."""
    result = run_git(
        [
            "-C", str(repo_path), "tag",
            "--sort=-version:refname", "-l", "v*",
            "--format=%(refname:short) %(objectname) %(*objectname)",
        ],
        context="tag",
        timeout=timeout,
    )
    if not isinstance(result, Ok):
        return Err(result.kind, {**result.context, "repo": str(repo_path)})
    return Ok(parse_local_tag_lines(result.value))


def list_remote_tags(org: str, repo: str, timeout: Optional[float] = None) -> Result:
    """List tags of ``github.com/<org>/<repo>``, newest first. Result[List[TagInfo]]."""
    url = Constants.GITHUB_URL.format(org=org, repo=repo)
    result = run_git(
        ["ls-remote", "--tags", "--sort=-version:refname", url],
        context="ls-remote",
        timeout=timeout,
    )
    if not isinstance(result, Ok):
        return Err(result.kind, {**result.context, "repo": f"{org}/{repo}"})
    return Ok(parse_remote_tag_lines(result.value))


class GitTagSource:
    """Bundles remote and local tag listing so callers can inject a fake."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def remote_tags(self, org: str, repo: str) -> Result:
        return list_remote_tags(org, repo, timeout=self.timeout)

    def local_tags(self, repo_path: str) -> Result:
        return list_local_tags(repo_path, timeout=self.timeout)
