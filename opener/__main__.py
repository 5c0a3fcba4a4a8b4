"""Command line entry point: ``python -m opener``."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .errors import NonZeroExitError, OpenError
from .launch import Launcher, default_launcher
from .models import OpenOptions

_LOGGER = logging.getLogger("opener")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opener",
        description="Open a file, URL or application with the platform's native launcher.",
    )
    parser.add_argument("target", nargs="?", help="file, URL or identifier to open")
    parser.add_argument(
        "--app",
        action="append",
        default=[],
        metavar="NAME",
        help="application to open the target with; repeat to give fallbacks "
        "(chrome, firefox, edge, browser and browserPrivate are looked up per platform)",
    )
    parser.add_argument(
        "--arg",
        action="append",
        default=[],
        dest="arguments",
        metavar="ARG",
        help="extra argument passed to the application; may be repeated",
    )
    parser.add_argument("--wait", action="store_true", help="wait for the application to exit")
    parser.add_argument("--background", action="store_true", help="macOS: do not bring the app to the front")
    parser.add_argument("--new-instance", action="store_true", help="macOS: open a new instance of the app")
    parser.add_argument(
        "--allow-nonzero-exit-code",
        action="store_true",
        help="with --wait, do not fail when the application exits with a nonzero code",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log resolved commands")
    return parser


def build_options(args: argparse.Namespace, launcher: Launcher) -> OpenOptions:
    apps = []
    for name in args.app:
        # Known names such as "chrome" are expanded, anything else is used verbatim.
        binary = launcher.apps[name] if name in launcher.apps else name
        apps.append({"name": binary, "arguments": args.arguments})
    return OpenOptions(
        target=args.target,
        app=apps or None,
        wait=args.wait,
        background=args.background,
        new_instance=args.new_instance,
        allow_nonzero_exit_code=args.allow_nonzero_exit_code,
    )


def main(argv: Optional[List[str]] = None, launcher: Optional[Launcher] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )

    if args.target is None and not args.app:
        parser.error("a target or --app is required")

    launcher = launcher or default_launcher()
    if args.verbose:
        _LOGGER.debug("Environment: %s", launcher.environment.snapshot())
    try:
        launcher.open_options(build_options(args, launcher))
    except NonZeroExitError as exc:
        _LOGGER.error("%s", exc)
        return exc.exit_code if exc.exit_code > 0 else 1
    except OpenError as exc:
        _LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
