"""Configuration loading and CLI precedence.

Precedence, highest first: CLI flags, the YAML config file, then the
defaults in ``Constants``. The config file is either the path given with
``--config`` or the first of ``Constants.CONFIG_FILES`` found in the
workspace root.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a config file exists but cannot be used."""


@dataclass
class Settings:
    """Effective options for one invocation."""
    root: str = "."
    org: Optional[str] = None
    skip_dirs: List[str] = field(default_factory=lambda: list(Constants.DEFAULT_SKIP_DIRS))
    depth: int = Constants.DEFAULT_DEPTH
    apply: bool = False
    pre_release: bool = False
    max_workers: int = Constants.DEFAULT_MAX_WORKERS
    registries: List[str] = field(default_factory=lambda: list(Constants.REGISTRY_ORDER))
    request_timeout: float = Constants.REQUEST_TIMEOUT
    git_timeout: float = Constants.GIT_TIMEOUT


def find_config_file(root: str, explicit: Optional[str] = None) -> Optional[str]:
    """Path of the config file to load, or None."""
    if explicit:
        return explicit
    for name in Constants.CONFIG_FILES:
        candidate = os.path.join(root, name)
        if os.path.isfile(candidate):
            return candidate
    return None


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML config file into a dict.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Unable to load config {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return data


def _split_csv(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def build_settings(args, config: Optional[Dict[str, Any]] = None) -> Settings:
    """Merge parsed CLI arguments over config values over defaults."""
    config = config or {}
    settings = Settings()

    def _pick(arg_name: str, key: str):
        value = getattr(args, arg_name, None)
        if value is not None:
            return value
        return config.get(key)

    settings.root = getattr(args, "ROOT", None) or "."
    settings.org = _pick("ORG", "org")

    skip = _pick("SKIP_DIRS", "skip_dirs")
    if skip is not None:
        settings.skip_dirs = _split_csv(skip)

    depth = _pick("DEPTH", "depth")
    if depth is not None:
        try:
            settings.depth = int(depth)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"depth must be an integer, got {depth!r}") from e

    workers = _pick("MAX_WORKERS", "max_workers")
    if workers is not None:
        try:
            settings.max_workers = max(1, int(workers))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"max_workers must be an integer, got {workers!r}") from e

    settings.apply = bool(getattr(args, "APPLY", False))
    settings.pre_release = bool(getattr(args, "PRE_RELEASE", False) or config.get("pre_release", False))

    registries = config.get("registries")
    if registries:
        unknown = [r for r in _split_csv(registries) if r not in Constants.REGISTRY_ORDER]
        if unknown:
            raise ConfigError(f"Unknown registries: {', '.join(unknown)}")
        settings.registries = _split_csv(registries)

    for key in ("request_timeout", "git_timeout"):
        if config.get(key) is not None:
            try:
                setattr(settings, key, float(config[key]))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"{key} must be a number, got {config[key]!r}") from e
    return settings


def apply_timeout_overrides(settings: Settings) -> None:
    """Push configured timeouts into the collaborator defaults."""
    Constants.REQUEST_TIMEOUT = settings.request_timeout  # type: ignore[misc]
    Constants.GIT_TIMEOUT = settings.git_timeout  # type: ignore[misc]
    logger.debug("Timeouts: http=%ss git=%ss", settings.request_timeout, settings.git_timeout)
