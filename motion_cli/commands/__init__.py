"""Command registry for the ``motion-core`` CLI."""

from __future__ import annotations

import sys
from argparse import ArgumentParser, Namespace
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from motion_core.context import CommandContext
from motion_core.pkg_manager import Installer
from motion_core.registry import CacheStore, RegistryClient
from motion_core.registry.client import HttpSession
from motion_core.reporter import Reporter
from motion_core.settings import Settings

C = TypeVar("C", bound=type["MotionCommand"])

COMMANDS: dict[str, type["MotionCommand"]] = {}


def _stdin_is_tty() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def motioncommand(name: str, help: str) -> Callable[[C], C]:
    def decorator(cls: C) -> C:
        cls.name = name
        cls.help = help
        COMMANDS[name] = cls
        return cls

    return decorator


@dataclass
class CliRuntime:
    """Everything a command needs from the outside world."""

    settings: Settings
    reporter: Reporter
    start_dir: Path
    registry_url: str
    session: HttpSession | None = None
    registry: RegistryClient | None = None
    installer: Installer | None = None
    stdin_is_tty: Callable[[], bool] = _stdin_is_tty

    def context(self) -> CommandContext:
        cache_store = CacheStore.from_settings(self.settings)
        registry = self.registry or RegistryClient.from_url(self.registry_url, cache_store, session=self.session)
        return CommandContext.discover(self.start_dir, registry, cache_store)


class MotionCommand:
    name = ""
    help = ""

    def __init__(self, runtime: CliRuntime) -> None:
        self.runtime = runtime
        self.reporter = runtime.reporter

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        return None

    def run(self, argv: Namespace) -> int:
        raise NotImplementedError

    def prefix(self) -> str:
        return f"[motion-core:{self.name}]"


def load_builtin_commands() -> dict[str, type[MotionCommand]]:
    from . import add, cache, init, listing  # noqa: F401

    return COMMANDS
