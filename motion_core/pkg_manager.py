"""Package-manager detection and install command execution."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from .errors import PackageManagerError

logger = logging.getLogger(__name__)


class PackageManagerKind(str, Enum):
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return self.value


_LOCKFILES: tuple[tuple[tuple[str, ...], PackageManagerKind], ...] = (
    (("pnpm-lock.yaml",), PackageManagerKind.PNPM),
    (("yarn.lock",), PackageManagerKind.YARN),
    (("bun.lockb", "bun.lock"), PackageManagerKind.BUN),
    (("package-lock.json",), PackageManagerKind.NPM),
)


def detect_package_manager(start_dir: Path) -> PackageManagerKind:
    """Return the manager owning the nearest lockfile at or above ``start_dir``."""
    current = start_dir.resolve()
    for candidate in (current, *current.parents):
        for names, kind in _LOCKFILES:
            if any((candidate / name).exists() for name in names):
                return kind
    return PackageManagerKind.UNKNOWN


def _executable(name: str) -> str:
    return f"{name}.cmd" if os.name == "nt" else name


@dataclass(frozen=True)
class InstallPlan:
    manager: PackageManagerKind
    packages: tuple[str, ...]
    dev: bool = False

    def command(self) -> list[str]:
        if self.manager is PackageManagerKind.NPM:
            argv = [_executable("npm"), "install"]
            if self.dev:
                argv.append("--save-dev")
        elif self.manager is PackageManagerKind.PNPM:
            argv = [_executable("pnpm"), "add"]
            if self.dev:
                argv.append("-D")
        elif self.manager is PackageManagerKind.YARN:
            argv = [_executable("yarn"), "add"]
            if self.dev:
                argv.append("-D")
        elif self.manager is PackageManagerKind.BUN:
            argv = ["bun", "add"]
            if self.dev:
                argv.append("-d")
        else:
            raise PackageManagerError("cannot build an install command for an unknown package manager")
        argv.extend(self.packages)
        return argv


Installer = Callable[[InstallPlan, Path], None]


def run_install_plan(plan: InstallPlan, cwd: Path) -> None:
    if not plan.packages:
        return
    argv = plan.command()
    logger.info("running %s in %s", " ".join(argv), cwd)
    try:
        proc = subprocess.run(argv, cwd=str(cwd), check=False)
    except OSError as exc:
        raise PackageManagerError(f"failed to run {argv[0]}: {exc}") from exc
    if proc.returncode != 0:
        raise PackageManagerError(f"{_describe(argv)} exited with status {proc.returncode}")


def _describe(argv: Sequence[str]) -> str:
    return " ".join(argv[:2])
