from __future__ import annotations

import argparse
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import NoReturn, Optional

from . import __version__
from .config import load_config
from .errors import CaskPubError, HelpRequested, ToolFailure, UsageError, VersionRequested
from .paths import resolve_user_path
from .pipeline import Collaborators, InvocationArgs, run

logger = logging.getLogger(__name__)

_HELP_FLAGS = {"-h", "--help"}


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports problems as UsageError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(
        prog="caskpub",
        add_help=False,
        allow_abbrev=False,
        description="Render a Homebrew cask for a disk image and install/test/publish it.",
    )
    p.add_argument("image", help="DMG path or URL (http, https, ftp, file)")
    p.add_argument("-i", "--install", action="store_true", help="Install the app locally")
    p.add_argument("-l", "--launch", action="store_true", help="Launch app after installation")
    p.add_argument("-t", "--test", action="store_true", help="Test the cask")
    p.add_argument("-p", "--publish", action="store_true", help="Publish the cask by pushing it to GitHub")
    p.add_argument("-v", "--verbose", action="store_true", help="Log external commands and HTTP checks")
    p.add_argument("-c", "--config", type=str, default=None, help="JSON config file (overrides ~/.caskpub/config.json)")
    p.add_argument("-h", "--help", action="store_true", help="Print this help message")
    p.add_argument("--version", action="store_true", help="Print the version and exit")
    return p


def parse_invocation(argv: Optional[list[str]] = None, *, parser: Optional[argparse.ArgumentParser] = None) -> InvocationArgs:
    parser = parser or build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    # Help wins over a missing positional argument.
    if any(a in _HELP_FLAGS for a in argv):
        raise HelpRequested("help requested")
    if "--version" in argv:
        raise VersionRequested(__version__)
    ns = parser.parse_args(argv)
    return InvocationArgs(
        image=str(ns.image),
        install=bool(ns.install),
        launch=bool(ns.launch),
        test=bool(ns.test),
        publish=bool(ns.publish),
        verbose=bool(ns.verbose),
        config_path=resolve_user_path(ns.config) if ns.config else None,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")
    # httpx logs every request at INFO; keep that for --verbose only.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv: Optional[list[str]] = None, *, deps: Optional[Collaborators] = None) -> int:
    parser = build_parser()
    try:
        args = parse_invocation(argv, parser=parser)
    except HelpRequested as e:
        parser.print_help()
        return e.exit_code
    except VersionRequested as e:
        print(f"{parser.prog} {e}")
        return e.exit_code
    except UsageError as e:
        print(f"{parser.prog}: {e}", file=sys.stderr)
        parser.print_help(sys.stderr)
        return e.exit_code

    _configure_logging(args.verbose)

    try:
        cfg = load_config(args.config_path)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        logger.error("❌ Could not load config: %s", e)
        return UsageError.exit_code

    try:
        run(args, cfg, deps or Collaborators.default(cfg))
    except subprocess.CalledProcessError as e:
        err = ToolFailure.from_called_process_error(e)
        logger.error("❌ %s", err)
        return err.exit_code
    except CaskPubError as e:
        logger.error("❌ %s", e)
        return e.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
