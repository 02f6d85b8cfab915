"""Tests for change computation and application."""

from versioning.diff import (
    apply_changes,
    compute_changes,
    compute_registry_changes,
    compute_sync_changes,
    compute_upgrade_changes,
    dedupe_changes,
    group_changes_by_path,
    summarize_by_library,
)
from versioning.models import ChangeEntry, CoordinateKind, FileContent, TagInfo

APP = FileContent(
    path="/w/app/deps.edn",
    project="app",
    text=('{:deps {io.github.acme/events {:git/tag "v0.3.0" :git/sha "abc1234"}\n'
          '        cheshire/cheshire {:mvn/version "5.13.0"}\n'
          '        org.clojure/clojure {:mvn/version "1.12.0"}}}\n'),
)
SVC = FileContent(
    path="/w/svc/deps.edn",
    project="svc",
    text=('{:deps {io.github.acme/events {:git/tag "v0.4.0" :git/sha "def5678"}\n'
          '        cheshire/cheshire {:mvn/version "5.12.0"}}}\n'),
)
EVENTS = TagInfo("v0.4.0", "def5678" + "9" * 33, short_sha="def5678")


class TestSyncChanges:
    """Git coordinates against resolved tags."""

    def test_stale_coordinate_reported(self):
        changes = compute_sync_changes([APP, SVC], {"io.github.acme/events": EVENTS})
        assert changes == [ChangeEntry(
            path="/w/app/deps.edn", project="app", library="io.github.acme/events",
            kind=CoordinateKind.GIT, old_tag="v0.3.0", old_sha="abc1234",
            new_tag="v0.4.0", new_sha="def5678",
        )]

    def test_short_sha_prefix_counts_as_match(self):
        assert compute_sync_changes([SVC], {"io.github.acme/events": EVENTS}) == []

    def test_same_tag_different_sha(self):
        retagged = TagInfo("v0.4.0", "1234567" + "0" * 33, short_sha="1234567")
        changes = compute_sync_changes([SVC], {"io.github.acme/events": retagged})
        assert [c.new_sha for c in changes] == ["1234567"]

    def test_unresolved_library_ignored(self):
        assert compute_sync_changes([APP], {}) == []


class TestRegistryChanges:
    """Registry coordinates against resolved versions."""

    def test_differs(self):
        changes = compute_registry_changes([APP, SVC], {"cheshire/cheshire": "5.13.0"})
        assert [(c.project, c.old_version, c.new_version) for c in changes] == [("svc", "5.12.0", "5.13.0")]

    def test_differs_includes_downgrade(self):
        changes = compute_registry_changes([APP], {"org.clojure/clojure": "1.11.1"})
        assert [c.new_version for c in changes] == ["1.11.1"]

    def test_upgrade_never_downgrades(self):
        assert compute_upgrade_changes([APP], {"org.clojure/clojure": "1.11.1"}) == []
        changes = compute_upgrade_changes([APP], {"org.clojure/clojure": "1.12.1"})
        assert [c.new_version for c in changes] == ["1.12.1"]


class TestComputeChanges:
    """Combined change set."""

    def test_both_kinds(self):
        resolved = {"io.github.acme/events": EVENTS, "cheshire/cheshire": "5.14.0"}
        changes = compute_changes([APP, SVC], resolved)
        kinds = [(c.project, c.library, c.kind) for c in changes]
        assert kinds == [
            ("app", "io.github.acme/events", CoordinateKind.GIT),
            ("app", "cheshire/cheshire", CoordinateKind.REGISTRY),
            ("svc", "cheshire/cheshire", CoordinateKind.REGISTRY),
        ]

    def test_unique_per_path_and_library(self):
        text = ('{:deps {acme/foo {:mvn/version "1.0.0"}}\n'
                ' :aliases {:dev {:extra-deps {acme/foo {:mvn/version "0.9.0"}}}}}')
        content = FileContent("/w/x/deps.edn", "x", text)
        changes = compute_changes([content], {"acme/foo": "2.0.0"})
        assert len(changes) == 1
        assert changes[0].old_version == "1.0.0"

    def test_no_changes_when_in_sync(self):
        assert compute_changes([SVC], {"io.github.acme/events": EVENTS, "cheshire/cheshire": "5.12.0"}) == []


class TestApply:
    """Folding changes into text."""

    def test_apply_then_recompute_is_empty(self):
        resolved = {"io.github.acme/events": EVENTS, "cheshire/cheshire": "5.14.0"}
        changes = compute_changes([APP], resolved)
        updated = apply_changes(APP.text, changes)
        assert compute_changes([FileContent(APP.path, APP.project, updated)], resolved) == []
        assert 'org.clojure/clojure {:mvn/version "1.12.0"}' in updated

    def test_apply_nothing_is_identity(self):
        assert apply_changes(APP.text, []) == APP.text


class TestGroupingAndSummary:
    """Helpers for writing and reporting."""

    def test_dedupe_first_wins(self):
        a = ChangeEntry("/p", "p", "acme/foo", CoordinateKind.REGISTRY, old_version="1", new_version="2")
        b = ChangeEntry("/p", "p", "acme/foo", CoordinateKind.REGISTRY, old_version="0", new_version="2")
        assert dedupe_changes([a, b]) == [a]

    def test_group_by_path_keeps_order(self):
        changes = compute_changes([APP, SVC], {"cheshire/cheshire": "5.14.0"})
        assert list(group_changes_by_path(changes)) == ["/w/app/deps.edn", "/w/svc/deps.edn"]

    def test_summary_rows(self):
        changes = compute_upgrade_changes([APP, SVC], {"cheshire/cheshire": "5.14.0", "org.clojure/clojure": "1.12.1"})
        rows = summarize_by_library(changes)
        assert [r["library"] for r in rows] == ["cheshire/cheshire", "org.clojure/clojure"]
        assert rows[0]["projects"] == ["app", "svc"]
        assert rows[0]["old"] == "5.13.0"
        assert rows[0]["new"] == "5.14.0"

    def test_labels(self):
        change = compute_sync_changes([APP], {"io.github.acme/events": EVENTS})[0]
        assert change.old_label == "v0.3.0 abc1234"
        assert change.new_label == "v0.4.0 def5678"
