"""Hyprsession command line."""

import argparse
import asyncio
import sys

from . import ipc_paths
from .config import coerce_to_bool
from .config_loader import load_config
from .logging_setup import get_logger, init_logger
from .manager import HyprSession
from .models import ConfigError, ExitCode

__all__ = ["get_parser", "main"]

EPILOG = """
By default, restores the last session first; if there is none, starts saving
the session periodically.

Examples:
  $ hyprsession --save-session
  ✔ Saved current session

  Store a session once:
  $ hyprsession --save-session --auto-save=false
"""


def _bool_arg(value: str) -> bool:
    """Parse a boolean flag value ("true", "no", "0"...)."""
    return coerce_to_bool(value)


def get_parser() -> argparse.ArgumentParser:
    """Return the command line parser."""
    parser = argparse.ArgumentParser(
        prog="hyprsession",
        description="Save the current Hyprland clients and restore them on Hyprland start.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("-r", "--restore-session", action="store_true", help="Restore the last session and exit")
    parser.add_argument("-s", "--save-session", action="store_true", help="Save the current session")
    parser.add_argument(
        "-a",
        "--auto-save",
        nargs="?",
        const=True,
        default=None,
        type=_bool_arg,
        metavar="BOOL",
        help="Periodically save the running session [default=true]",
    )
    parser.add_argument("-i", "--interval", type=int, default=None, metavar="SECONDS", help="Time between auto saves [default=60]")
    parser.add_argument("-x", "--silent", action="store_true", default=None, help="Don't print anything")
    parser.add_argument("-v", "--debug", action="store_true", default=None, help="Print debug logs")
    parser.add_argument("--config", metavar="FILE", default="", help="Use a different configuration file")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the command."""
    args = get_parser().parse_args(argv)

    init_logger(force_debug=bool(args.debug), silent=bool(args.silent))
    log = get_logger("startup")
    try:
        config = load_config(
            log,
            args.config,
            overrides={
                "auto_save": args.auto_save,
                "interval": args.interval,
                "silent": args.silent,
                "debug": args.debug,
            },
        )
    except ConfigError:
        log.critical("Invalid configuration.")
        sys.exit(ExitCode.CONFIG_ERROR)

    init_logger(force_debug=config.get_bool("debug"), silent=config.get_bool("silent"))
    log = get_logger("startup")

    if not ipc_paths.HYPRLAND_INSTANCE_SIGNATURE:
        log.critical("HYPRLAND_INSTANCE_SIGNATURE is not set, is Hyprland running ?")
        sys.exit(ExitCode.ENV_ERROR)
    ipc_paths.init_ipc_folder()

    try:
        code = asyncio.run(HyprSession(config).serve(restore_only=args.restore_session, save_only=args.save_session))
    except KeyboardInterrupt:
        code = ExitCode.SUCCESS
    except Exception:  # pylint: disable=broad-except
        log.critical("Unhandled exception:", exc_info=True)
        code = ExitCode.SNAPSHOT_ERROR
    sys.exit(code)


if __name__ == "__main__":
    main()
