"""Argument parsing functionality for depsync."""

import argparse


def _common_parser() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root",
                        dest="ROOT",
                        help="Workspace root (default: current directory)",
                        action="store", type=str,
                        default=None)
    common.add_argument("--skip-dirs",
                        dest="SKIP_DIRS",
                        help="Comma-separated directories to skip (default: vendor,node_modules,.git,target,...)",
                        action="store", type=str)
    common.add_argument("--depth",
                        dest="DEPTH",
                        help="0 scans only the root, 1 scans its child projects (default: 1)",
                        action="store", type=int)
    common.add_argument("--max-workers",
                        dest="MAX_WORKERS",
                        help="Resolve libraries in parallel with this many workers (default: 1)",
                        action="store", type=int)
    common.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to YAML configuration file (default: depsync.yml in the root)",
                        action="store", type=str)
    common.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store", type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    common.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store", type=str)
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with one subparser per command."""
    common = _common_parser()
    parser = argparse.ArgumentParser(
        prog="depsync",
        description="depsync - workspace dependency sync, upgrade & reporting",
        add_help=True,
    )
    sub = parser.add_subparsers(dest="action", metavar="<command>")

    sync = sub.add_parser("sync", parents=[common],
                          help="Sync internal git deps to their latest tags")
    sync.add_argument("--org", dest="ORG", type=str,
                      help="GitHub org owning the internal deps (e.g. acme)")
    sync.add_argument("--apply", dest="APPLY", action="store_true",
                      help="Write changes (default: dry run)")

    upgrade = sub.add_parser("upgrade", parents=[common],
                             help="Upgrade registry deps to their latest versions")
    upgrade.add_argument("--pre-release", dest="PRE_RELEASE", action="store_true",
                         help="Allow pre-release versions")
    upgrade.add_argument("--apply", dest="APPLY", action="store_true",
                         help="Select and write upgrades (default: dry run)")

    sub.add_parser("report", parents=[common],
                   help="Show the dependency matrix across projects")

    lint = sub.add_parser("lint", parents=[common],
                          help="Detect :local/root deps in committed dep files")
    lint.add_argument("--fix", dest="FIX", action="store_true",
                      help="Move local paths to local.deps.edn and resolve remote coordinates")
    lint.add_argument("--org", dest="ORG", type=str,
                      help="GitHub org owning the internal deps")

    bump = sub.add_parser("bump", parents=[common],
                          help="Bump VERSION, commit, tag and push",
                          description="Bump VERSION, commit, tag and push. Each flag bumps the part it "
                                      "names; --stable is kept as an alias for --major.")
    part = bump.add_mutually_exclusive_group()
    part.add_argument("--major", dest="PART", action="store_const", const="major",
                      help="Bump the major version")
    part.add_argument("--minor", dest="PART", action="store_const", const="minor",
                      help="Bump the minor version")
    part.add_argument("--patch", dest="PART", action="store_const", const="patch",
                      help="Bump the patch version (default)")
    part.add_argument("--stable", dest="PART", action="store_const", const="major",
                      help="Alias for --major")
    bump.add_argument("--no-push", dest="NO_PUSH", action="store_true",
                      help="Commit and tag locally without pushing")
    bump.add_argument("--sync", dest="SYNC", action="store_true",
                      help="Run sync --apply on the parent workspace afterwards")
    bump.add_argument("--org", dest="ORG", type=str,
                      help="GitHub org for the follow-up sync")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
