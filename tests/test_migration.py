"""Tests for local-coordinate migration and the overlay file."""

from common.result import Err, ErrorKind, Ok
from versioning.coordinates import find_local_coordinates
from versioning.migration import ensure_gitignore_entry, migrate_local_coordinates, render_local_overlay
from versioning.models import CoordinateKind, TagInfo

TEXT = ('{:deps {io.github.acme/events {:local/root "../events"}\n'
        '        cheshire/cheshire {:local/root "../cheshire"}\n'
        '        io.github.acme/gone {:local/root "../gone"}\n'
        '        org.clojure/clojure {:mvn/version "1.12.0"}}}\n')


def _resolve_tag(lib):
    if lib == "io.github.acme/events":
        return Ok(TagInfo("v0.4.0", "d" * 40, short_sha="ddddddd"))
    return Err(ErrorKind.NOT_FOUND, {"library": lib})


def _resolve_version(lib):
    return Ok("5.13.0") if lib == "cheshire/cheshire" else Err(ErrorKind.IO)


class TestMigrate:
    """migrate_local_coordinates."""

    def test_partial_migration(self):
        result = migrate_local_coordinates(TEXT, "/w", resolve_tag=_resolve_tag, resolve_version=_resolve_version)
        assert 'io.github.acme/events {:git/tag "v0.4.0" :git/sha "ddddddd"}' in result.text
        assert 'cheshire/cheshire {:mvn/version "5.13.0"}' in result.text
        assert 'io.github.acme/gone {:local/root "../gone"}' in result.text
        assert result.replaced == 2
        assert [o.library for o in result.failed] == ["io.github.acme/gone"]
        assert result.failed[0].error.kind == ErrorKind.NOT_FOUND

    def test_outcome_kinds(self):
        result = migrate_local_coordinates(TEXT, "/w", resolve_tag=_resolve_tag, resolve_version=_resolve_version)
        kinds = {o.library: o.kind for o in result.outcomes}
        assert kinds["io.github.acme/events"] == CoordinateKind.GIT
        assert kinds["cheshire/cheshire"] == CoordinateKind.REGISTRY
        assert kinds["io.github.acme/gone"] is None

    def test_only_local_coordinates_change(self):
        result = migrate_local_coordinates(TEXT, "/w", resolve_tag=_resolve_tag, resolve_version=_resolve_version)
        assert 'org.clojure/clojure {:mvn/version "1.12.0"}' in result.text
        assert [c.library for c in find_local_coordinates(result.text)] == ["io.github.acme/gone"]

    def test_each_library_resolved_once(self):
        calls = []

        def resolve_version(lib):
            calls.append(lib)
            return Ok("1.0.0")

        text = ('{:deps {acme/foo {:local/root "../foo"}}\n'
                ' :aliases {:dev {:extra-deps {acme/foo {:local/root "../foo"}}}}}')
        result = migrate_local_coordinates(text, "/w", resolve_version=resolve_version)
        assert calls == ["acme/foo"]
        assert result.text.count(':mvn/version "1.0.0"') == 2

    def test_nothing_local(self):
        text = '{:deps {org.clojure/clojure {:mvn/version "1.12.0"}}}'
        result = migrate_local_coordinates(text, "/w", resolve_tag=_resolve_tag, resolve_version=_resolve_version)
        assert result.text == text
        assert result.outcomes == []


class TestOverlay:
    """Overlay rendering and .gitignore maintenance."""

    def test_render_overlay(self):
        overlay = render_local_overlay(find_local_coordinates(TEXT))
        assert overlay.startswith(";; local.deps.edn: machine-specific overrides")
        assert overlay.endswith(
            '{:deps {io.github.acme/events {:local/root "../events"}\n'
            '        cheshire/cheshire {:local/root "../cheshire"}\n'
            '        io.github.acme/gone {:local/root "../gone"}}}\n'
        )
        assert len(find_local_coordinates(overlay)) == 3

    def test_gitignore_added(self):
        assert ensure_gitignore_entry("", "local.deps.edn") == "local.deps.edn\n"
        assert ensure_gitignore_entry("target/", "local.deps.edn") == "target/\nlocal.deps.edn\n"

    def test_gitignore_idempotent(self):
        text = ".cpcache/\nlocal.deps.edn\n"
        assert ensure_gitignore_entry(text, "local.deps.edn") == text
