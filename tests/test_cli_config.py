"""Tests for argument parsing and configuration precedence."""

import pytest

from args import parse_args
from cli_config import ConfigError, Settings, apply_timeout_overrides, build_settings, find_config_file, load_config
from constants import Constants


class TestArgs:
    """parse_args."""

    def test_sync(self):
        args = parse_args(["sync", "--org", "acme", "--apply", "--root", "/w"])
        assert args.action == "sync"
        assert args.ORG == "acme"
        assert args.APPLY is True
        assert args.ROOT == "/w"

    def test_bump_part(self):
        args = parse_args(["bump", "--minor", "--no-push"])
        assert args.PART == "minor"
        assert args.NO_PUSH is True

    def test_bump_stable_is_major_alias(self):
        assert parse_args(["bump", "--stable"]).PART == "major"
        with pytest.raises(SystemExit):
            parse_args(["bump", "--stable", "--major"])

    def test_bump_parts_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["bump", "--major", "--minor"])

    def test_loglevel_uppercased(self):
        assert parse_args(["report", "--loglevel", "debug"]).LOG_LEVEL == "DEBUG"

    def test_lint_fix(self):
        args = parse_args(["lint", "--fix"])
        assert args.FIX is True


class TestConfigFile:
    """find_config_file / load_config."""

    def test_discovered_in_root(self, tmp_path):
        (tmp_path / ".depsync.yml").write_text("org: acme\n")
        assert find_config_file(str(tmp_path)).endswith(".depsync.yml")

    def test_explicit_wins(self, tmp_path):
        (tmp_path / "depsync.yml").write_text("org: acme\n")
        assert find_config_file(str(tmp_path), "/etc/other.yml") == "/etc/other.yml"

    def test_none_found(self, tmp_path):
        assert find_config_file(str(tmp_path)) is None
        assert load_config(None) == {}

    def test_load(self, tmp_path):
        path = tmp_path / "depsync.yml"
        path.write_text("org: acme\nskip_dirs: [vendor, scratch]\nmax_workers: 4\n")
        assert load_config(str(path)) == {"org": "acme", "skip_dirs": ["vendor", "scratch"], "max_workers": 4}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "depsync.yml"
        path.write_text("")
        assert load_config(str(path)) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "depsync.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "depsync.yml"
        path.write_text("org: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_missing_explicit(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "missing.yml"))


class TestBuildSettings:
    """CLI over config over defaults."""

    def test_defaults(self):
        settings = build_settings(parse_args(["report"]), {})
        assert settings == Settings()

    def test_config_used(self):
        config = {"org": "acme", "skip_dirs": "vendor,scratch", "depth": 0, "registries": ["maven"]}
        settings = build_settings(parse_args(["report"]), config)
        assert settings.org == "acme"
        assert settings.skip_dirs == ["vendor", "scratch"]
        assert settings.depth == 0
        assert settings.registries == ["maven"]

    def test_cli_overrides_config(self):
        args = parse_args(["sync", "--org", "other", "--skip-dirs", "a,b", "--max-workers", "8"])
        settings = build_settings(args, {"org": "acme", "skip_dirs": ["x"], "max_workers": 2})
        assert settings.org == "other"
        assert settings.skip_dirs == ["a", "b"]
        assert settings.max_workers == 8

    def test_bad_values(self):
        with pytest.raises(ConfigError):
            build_settings(parse_args(["report"]), {"depth": "deep"})
        with pytest.raises(ConfigError):
            build_settings(parse_args(["report"]), {"registries": ["npm"]})
        with pytest.raises(ConfigError):
            build_settings(parse_args(["report"]), {"request_timeout": "soon"})

    def test_timeouts_pushed_to_constants(self, monkeypatch):
        monkeypatch.setattr(Constants, "REQUEST_TIMEOUT", Constants.REQUEST_TIMEOUT)
        monkeypatch.setattr(Constants, "GIT_TIMEOUT", Constants.GIT_TIMEOUT)
        settings = build_settings(parse_args(["report"]), {"request_timeout": 5, "git_timeout": 7})
        apply_timeout_overrides(settings)
        assert Constants.REQUEST_TIMEOUT == 5.0
        assert Constants.GIT_TIMEOUT == 7.0
