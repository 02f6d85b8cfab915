"""depsync - keep a workspace of Clojure projects on aligned dependency versions.

Entry point: parses arguments, sets up logging and configuration, then
dispatches to the subcommand runner.
"""

import logging
import os
import sys

from args import build_parser
from cli_bump import run_bump
from cli_config import ConfigError, apply_timeout_overrides, build_settings, find_config_file, load_config
from cli_lint import run_lint
from cli_report import run_report
from cli_sync import run_sync
from cli_upgrade import run_upgrade
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes


def _setup_logging(args) -> None:
    # Honor CLI --loglevel by passing it to the centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = args.LOG_LEVEL
    configure_logging()

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logging.getLogger(__name__).info("Logging to file: %s", log_file)


def dispatch(args, settings) -> int:
    """Run the selected subcommand and return its exit code."""
    if args.action == "sync":
        return run_sync(settings)
    if args.action == "upgrade":
        return run_upgrade(settings)
    if args.action == "report":
        return run_report(settings)
    if args.action == "lint":
        return run_lint(settings, fix=bool(getattr(args, "FIX", False)))
    if args.action == "bump":
        return run_bump(
            settings,
            part=getattr(args, "PART", None),
            push=not getattr(args, "NO_PUSH", False),
            sync=bool(getattr(args, "SYNC", False)),
        )
    raise ValueError(f"Unknown command: {args.action}")


def run(argv=None) -> int:
    """Parse ``argv`` and run the command; returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "action", None):
        parser.print_help()
        return ExitCodes.USAGE_ERROR.value

    _setup_logging(args)
    logger = logging.getLogger(__name__)
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    root = getattr(args, "ROOT", None) or "."
    try:
        config = load_config(find_config_file(root, getattr(args, "CONFIG", None)))
        settings = build_settings(args, config)
    except ConfigError as e:
        logging.error("%s", e)
        return ExitCodes.USAGE_ERROR.value
    apply_timeout_overrides(settings)

    code = dispatch(args, settings)
    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action=args.action, exit_code=code)
        )
    return code


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()
