"""Tests for git tag listing."""

import subprocess
from unittest.mock import MagicMock, patch

from common.result import Err, ErrorKind, Ok
from repository.git_tags import (
    GitTagSource,
    list_local_tags,
    list_remote_tags,
    parse_local_tag_lines,
    parse_remote_tag_lines,
    run_git,
)
from versioning.models import TagInfo

FULL_A = "a" * 40
FULL_B = "b" * 40
FULL_C = "c" * 40


def _completed(returncode=0, stdout="", stderr=""):
    proc = MagicMock()
    proc.returncode = returncode
    proc.stdout = stdout
    proc.stderr = stderr
    return proc


class TestParseLines:
    """Parsing git output into TagInfo values."""

    def test_remote_prefers_peeled_sha(self):
        output = (
            f"{FULL_A}\trefs/tags/v0.2.0\n"
            f"{FULL_B}\trefs/tags/v0.2.0^{{}}\n"
            f"{FULL_C}\trefs/tags/v0.1.0\n"
        )
        tags = parse_remote_tag_lines(output)
        assert tags == [
            TagInfo("v0.2.0", FULL_B, short_sha="bbbbbbb"),
            TagInfo("v0.1.0", FULL_C, short_sha="ccccccc"),
        ]

    def test_remote_ignores_noise(self):
        output = f"warning: something\n{FULL_A}\trefs/heads/main\n\n{FULL_C}\trefs/tags/v1.0.0\n"
        assert [t.tag for t in parse_remote_tag_lines(output)] == ["v1.0.0"]

    def test_local_lightweight_and_annotated(self):
        output = f"v0.2.0 {FULL_A} {FULL_B}\nv0.1.0 {FULL_C} \n"
        tags = parse_local_tag_lines(output)
        assert tags[0] == TagInfo("v0.2.0", FULL_B, short_sha="bbbbbbb")
        assert tags[1] == TagInfo("v0.1.0", FULL_C, short_sha="ccccccc")

    def test_local_skips_short_lines(self):
        assert parse_local_tag_lines("v0.1.0\n\n") == []


class TestRunGit:
    """Subprocess failures become Err(IO)."""

    @patch("repository.git_tags.subprocess.run")
    def test_success(self, mock_run):
        mock_run.return_value = _completed(stdout="out")
        assert run_git(["status"], context="status") == Ok("out")
        assert mock_run.call_args[0][0] == ["git", "status"]

    @patch("repository.git_tags.subprocess.run")
    def test_nonzero_exit(self, mock_run):
        mock_run.return_value = _completed(returncode=128, stderr="fatal: not a repo\n")
        result = run_git(["tag"], context="tag")
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.IO
        assert result.context["exit_code"] == 128
        assert result.context["stderr"] == "fatal: not a repo"

    @patch("repository.git_tags.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=1)
        result = run_git(["ls-remote"], context="ls-remote", timeout=1)
        assert result == Err(ErrorKind.IO, {"command": "ls-remote", "error": "timeout"})

    @patch("repository.git_tags.subprocess.run")
    def test_missing_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("git")
        result = run_git(["tag"], context="tag")
        assert result.kind == ErrorKind.IO


class TestListTags:
    """list_local_tags / list_remote_tags."""

    @patch("repository.git_tags.subprocess.run")
    def test_remote_uses_github_url(self, mock_run):
        mock_run.return_value = _completed(stdout=f"{FULL_A}\trefs/tags/v1.0.0\n")
        result = list_remote_tags("acme", "events")
        assert isinstance(result, Ok)
        assert result.value[0].tag == "v1.0.0"
        assert "https://github.com/acme/events" in mock_run.call_args[0][0]

    @patch("repository.git_tags.subprocess.run")
    def test_remote_failure_names_repo(self, mock_run):
        mock_run.return_value = _completed(returncode=2)
        result = list_remote_tags("acme", "events")
        assert result.context["repo"] == "acme/events"

    @patch("repository.git_tags.subprocess.run")
    def test_local_runs_in_clone(self, mock_run):
        mock_run.return_value = _completed(stdout=f"v1.0.0 {FULL_A} \n")
        result = GitTagSource().local_tags("/w/events")
        assert result.value == [TagInfo("v1.0.0", FULL_A, short_sha="aaaaaaa")]
        args = mock_run.call_args[0][0]
        assert args[:3] == ["git", "-C", "/w/events"]

    @patch("repository.git_tags.subprocess.run")
    def test_local_failure_names_repo(self, mock_run):
        mock_run.return_value = _completed(returncode=1)
        result = list_local_tags("/w/events")
        assert result.context["repo"] == "/w/events"
