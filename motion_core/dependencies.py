"""Reconcile required npm packages against the workspace's package.json."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping

from .errors import PackageManagerError
from .pkg_manager import InstallPlan, Installer, PackageManagerKind, run_install_plan
from .project import PackageSnapshot
from .versions import spec_satisfies

logger = logging.getLogger(__name__)


class DependencyActionKind(str, Enum):
    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"
    MANUAL = "manual"
    DRY_RUN = "dry_run"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class DependencyAction:
    kind: DependencyActionKind
    packages: tuple[str, ...] = ()
    reason: str | None = None

    @classmethod
    def already_installed(cls) -> "DependencyAction":
        return cls(DependencyActionKind.ALREADY_INSTALLED)

    @classmethod
    def skipped(cls, reason: str) -> "DependencyAction":
        return cls(DependencyActionKind.SKIPPED, reason=reason)

    @property
    def changed(self) -> bool:
        return self.kind is DependencyActionKind.INSTALLED


def diff_dependencies(requirements: Mapping[str, str], snapshot: PackageSnapshot) -> list[str]:
    """``name@spec`` for every requirement the installed specs do not cover, sorted by name."""
    return [
        f"{name}@{spec}"
        for name, spec in sorted(requirements.items())
        if not spec_satisfies(snapshot.spec_for(name), spec)
    ]


def reconcile_dependencies(
    requirements: Mapping[str, str],
    snapshot: PackageSnapshot | None,
    manager: PackageManagerKind,
    workspace_root: Path,
    *,
    dev: bool = False,
    dry_run: bool = False,
    installer: Installer | None = None,
) -> DependencyAction:
    scope = "dev" if dev else "runtime"
    if not requirements:
        return DependencyAction.already_installed()
    if snapshot is None:
        return DependencyAction.skipped(f"package.json unavailable; skipping {scope} dependency install.")

    missing = diff_dependencies(requirements, snapshot)
    if not missing:
        return DependencyAction.already_installed()
    if manager is PackageManagerKind.UNKNOWN:
        return DependencyAction(DependencyActionKind.MANUAL, tuple(missing))
    if dry_run:
        return DependencyAction(DependencyActionKind.DRY_RUN, tuple(missing))

    plan = InstallPlan(manager=manager, packages=tuple(missing), dev=dev)
    try:
        (installer or run_install_plan)(plan, workspace_root)
    except PackageManagerError as exc:
        raise PackageManagerError(f"failed to install {scope} dependencies: {exc}") from exc
    logger.info("installed %s dependencies: %s", scope, ", ".join(missing))
    return DependencyAction(DependencyActionKind.INSTALLED, tuple(missing))
