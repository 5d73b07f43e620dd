"""Prepare a Svelte workspace for Motion Core components."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from ..config import Config, TailwindEntry, save_config
from ..context import CommandContext
from ..dependencies import DependencyAction, reconcile_dependencies
from ..errors import RegistryError, UnsupportedSvelteError
from ..pkg_manager import Installer, PackageManagerKind, detect_package_manager
from ..project import FrameworkDetection, detect_framework, load_package_snapshot
from ..workspace import ScaffoldReport, TailwindSyncStatus, scaffold_workspace, sync_tailwind_tokens

logger = logging.getLogger(__name__)

_SKIPPED_DIRS = {"node_modules"}


class ConfigStateKind(str, Enum):
    ALREADY_EXISTS = "already_exists"
    CREATED = "created"
    WOULD_CREATE = "would_create"


@dataclass(frozen=True)
class ConfigState:
    kind: ConfigStateKind
    path: Path

    @property
    def changed(self) -> bool:
        return self.kind is ConfigStateKind.CREATED


@dataclass(frozen=True)
class BaseDependencyReport:
    runtime: DependencyAction
    dev: DependencyAction

    @property
    def changed(self) -> bool:
        return self.runtime.changed or self.dev.changed


@dataclass
class InitResult:
    dry_run: bool
    framework: FrameworkDetection
    package_manager: PackageManagerKind
    config_state: ConfigState
    scaffold: ScaffoldReport
    dependencies: BaseDependencyReport
    tokens_status: TailwindSyncStatus
    warnings: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        if self.dry_run:
            return False
        return (
            self.config_state.changed
            or self.scaffold.any()
            or self.dependencies.changed
            or self.tokens_status.updated
        )


def run(ctx: CommandContext, *, dry_run: bool = False, installer: Installer | None = None) -> InitResult:
    root = ctx.workspace_root
    warnings: list[str] = []

    framework = detect_framework(root)
    if not framework.is_svelte_supported:
        raise UnsupportedSvelteError(framework.svelte_version)
    if not framework.tailwind_supported:
        found = f" (found {framework.tailwind_version}) -" if framework.tailwind_version else "."
        warnings.append(
            f"Tailwind CSS v4 not detected{found} Install or upgrade Tailwind before using Motion Core components."
        )

    package_manager = detect_package_manager(root)
    config = ctx.load_config()
    if config is not None:
        config_state = ConfigState(ConfigStateKind.ALREADY_EXISTS, ctx.config_path)
    else:
        config = Config()
        if dry_run:
            config_state = ConfigState(ConfigStateKind.WOULD_CREATE, ctx.config_path)
        else:
            tailwind_css = locate_tailwind_css(root)
            if tailwind_css is not None:
                config = replace(config, tailwind=TailwindEntry(css=tailwind_css))
            save_config(ctx.config_path, config)
            config_state = ConfigState(ConfigStateKind.CREATED, ctx.config_path)

    scaffold = scaffold_workspace(root, config, ctx.registry, ctx.cache_store, dry_run=dry_run)
    tokens_status = sync_tailwind_tokens(root, config, ctx.registry, dry_run=dry_run)

    try:
        base = ctx.registry.base_dependencies()
    except RegistryError as exc:
        logger.warning("registry metadata unavailable: %s", exc)
        warnings.append(f"Registry metadata unavailable: {exc}")
        skipped = DependencyAction.skipped("Registry metadata unavailable; skipping base dependency install.")
        dependencies = BaseDependencyReport(runtime=skipped, dev=skipped)
    else:
        snapshot = load_package_snapshot(root)
        dependencies = BaseDependencyReport(
            runtime=reconcile_dependencies(
                base.dependencies, snapshot, package_manager, root, dry_run=dry_run, installer=installer
            ),
            dev=reconcile_dependencies(
                base.dev_dependencies, snapshot, package_manager, root, dev=True, dry_run=dry_run, installer=installer
            ),
        )

    return InitResult(
        dry_run=dry_run,
        framework=framework,
        package_manager=package_manager,
        config_state=config_state,
        scaffold=scaffold,
        dependencies=dependencies,
        tokens_status=tokens_status,
        warnings=warnings,
    )


def locate_tailwind_css(root: Path) -> str | None:
    """Shallowest stylesheet under ``root`` that references Tailwind."""
    best: tuple[int, str] | None = None
    for depth, path in _walk_css(root, root, 0):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        if "@tailwind" not in text and "tailwindcss" not in text:
            continue
        if best is None or depth < best[0]:
            best = (depth, path.relative_to(root).as_posix())
    return best[1] if best else None


def _walk_css(root: Path, directory: Path, depth: int):
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        logger.debug("skipping unreadable directory %s: %s", directory, exc)
        return
    for entry in entries:
        if entry.is_dir():
            if entry.name in _SKIPPED_DIRS or entry.name.startswith("."):
                continue
            yield from _walk_css(root, entry, depth + 1)
        elif entry.suffix == ".css":
            yield depth, entry
