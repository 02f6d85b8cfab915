"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2
    EXIT_WARNINGS = 3


class Registries(Enum):
    """Package registries queried for registry coordinates, in lookup order.

    Args:
        Enum (string): Registry identifiers.
    """

    CLOJARS = "clojars"
    MAVEN = "maven"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_CLOJARS = "https://clojars.org/api/artifacts/"
    REGISTRY_URL_MAVEN = "https://search.maven.org/solrsearch/select"
    REGISTRY_ORDER = [Registries.CLOJARS.value, Registries.MAVEN.value]
    GITHUB_URL = "https://github.com/{org}/{repo}"
    GITHUB_LIB_PREFIX = "io.github."

    DEPS_FILES = ["deps.edn", "bb.edn"]
    LOCAL_OVERLAY_FILE = "local.deps.edn"
    GITIGNORE_FILE = ".gitignore"
    VERSION_FILE = "VERSION"
    CONFIG_FILES = ["depsync.yml", ".depsync.yml"]
    DEFAULT_SKIP_DIRS = ["vendor", "node_modules", ".git", "target", ".cpcache", ".lsp"]
    DEFAULT_DEPTH = 1
    DEFAULT_MAX_WORKERS = 1

    PRE_RELEASE_MARKERS = ("alpha", "beta", "rc", "snapshot", "milestone", "preview")
    SHORT_SHA_MAX_LEN = 12
    SHORT_SHA_LEN = 7

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "DEPSYNC_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    GIT_TIMEOUT = 60  # Timeout in seconds for git subprocesses
