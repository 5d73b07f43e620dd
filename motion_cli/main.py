"""Argument parsing and dispatch for ``motion-core``."""

from __future__ import annotations

import logging
from argparse import ArgumentParser
from pathlib import Path
from typing import Callable, Sequence

from motion_core import __version__
from motion_core.errors import MotionCoreError
from motion_core.pkg_manager import Installer
from motion_core.registry import RegistryClient
from motion_core.registry.client import HttpSession
from motion_core.reporter import Reporter
from motion_core.settings import Settings

from .commands import CliRuntime, MotionCommand, load_builtin_commands
from .reporter import ConsoleReporter


def build_parser(commands: dict[str, type[MotionCommand]]) -> ArgumentParser:
    parser = ArgumentParser(prog="motion-core", description="Motion Core component toolkit CLI")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--registry-url", default=None, help="Override registry endpoint")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")
    for name in ("init", "list", "add", "cache"):
        command_cls = commands[name]
        sub = subparsers.add_parser(name, help=command_cls.help, description=command_cls.help)
        command_cls.configure(sub)
    return parser


def _configure_logging(verbose: bool, settings: Settings) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(
    argv: Sequence[str] | None = None,
    *,
    start_dir: Path | None = None,
    settings: Settings | None = None,
    reporter: Reporter | None = None,
    session: HttpSession | None = None,
    registry: RegistryClient | None = None,
    installer: Installer | None = None,
    stdin_is_tty: Callable[[], bool] | None = None,
) -> int:
    settings = settings or Settings.from_env()
    reporter = reporter or ConsoleReporter()
    commands = load_builtin_commands()
    parser = build_parser(commands)
    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(bool(args.verbose), settings)

    if not args.command:
        parser.print_help()
        return 1

    runtime = CliRuntime(
        settings=settings,
        reporter=reporter,
        start_dir=Path(start_dir) if start_dir is not None else Path.cwd(),
        registry_url=args.registry_url or settings.registry_url,
        session=session,
        registry=registry,
        installer=installer,
    )
    if stdin_is_tty is not None:
        runtime.stdin_is_tty = stdin_is_tty

    command = commands[args.command](runtime)
    try:
        return command.run(args)
    except MotionCoreError as exc:
        reporter.error(f"{command.prefix()} error: {exc}")
        return 1
    except KeyboardInterrupt:
        reporter.error(f"{command.prefix()} interrupted")
        return 130
