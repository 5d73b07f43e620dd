"""Plan and apply installation of registry components into a workspace.

:func:`plan` only reads: it resolves the dependency closure, fetches every
file and compares it with what is on disk. :func:`apply` performs the writes,
the barrel update and dependency installs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Sequence

from ..barrel import ComponentExportSpec, TypeExportSpec, render_component_barrel
from ..components import entry_export_name, is_component_source, resolve_component_destination
from ..config import Config
from ..context import CommandContext
from ..dependencies import DependencyAction, reconcile_dependencies
from ..errors import ComponentNotFoundError, MissingConfigError, WorkspaceIOError
from ..fsutil import replace_file, write_new_file
from ..paths import workspace_path
from ..pkg_manager import Installer, PackageManagerKind, detect_package_manager
from ..project import PackageSnapshot, load_package_snapshot
from ..registry import ComponentRecord

logger = logging.getLogger(__name__)


class PlannedFileStatus(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    UNCHANGED = "unchanged"


class FileStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass
class PlannedFile:
    component_name: str
    registry_path: str
    destination: Path
    contents: bytes
    existing_contents: bytes | None
    status: PlannedFileStatus
    apply: bool = True


@dataclass
class AddPlan:
    config: Config
    config_path: Path
    workspace_root: Path
    requested_components: list[str]
    component_map: dict[str, ComponentRecord]
    install_order: list[str]
    planned_files: list[PlannedFile]
    installed_components: list[ComponentExportSpec]
    registered_type_exports: list[TypeExportSpec]
    runtime_requirements: dict[str, str]
    dev_requirements: dict[str, str]
    barrel_path: Path
    existing_barrel: str
    package_manager: PackageManagerKind
    package_snapshot: PackageSnapshot | None
    missing_entry_components: list[str] = field(default_factory=list)

    def conflicts(self) -> list[PlannedFile]:
        return [item for item in self.planned_files if item.status is PlannedFileStatus.UPDATE]


@dataclass(frozen=True)
class FileApplyReport:
    destination: Path
    component_name: str
    status: FileStatus


@dataclass(frozen=True)
class ApplyOutcome:
    files: list[FileApplyReport]
    exports_updated: bool
    runtime: DependencyAction
    dev: DependencyAction
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        if self.dry_run:
            return False
        return (
            any(item.status in (FileStatus.CREATED, FileStatus.UPDATED) for item in self.files)
            or self.exports_updated
            or self.runtime.changed
            or self.dev.changed
        )


def resolve_install_order(requested: Sequence[str], components: dict[str, ComponentRecord]) -> list[str]:
    """Requested slugs plus their internal dependencies, each once, in discovery order."""
    order: list[str] = []
    seen: set[str] = set()
    stack = list(reversed(requested))
    while stack:
        slug = stack.pop()
        record = components.get(slug)
        if record is None:
            raise ComponentNotFoundError(slug)
        if slug in seen:
            continue
        seen.add(slug)
        order.append(slug)
        stack.extend(dep for dep in reversed(record.internal_dependencies) if dep not in seen)
    return order


def _read_existing(path: Path) -> bytes | None:
    if not path.exists():
        return None
    try:
        return path.read_bytes()
    except OSError as exc:
        raise WorkspaceIOError(path, str(exc)) from exc


def plan(ctx: CommandContext, components: Sequence[str]) -> AddPlan:
    config = ctx.load_config()
    if config is None:
        raise MissingConfigError(ctx.config_path)

    component_map = {entry.slug: entry.component for entry in ctx.registry.list_components()}
    install_order = resolve_install_order(components, component_map)

    workspace_root = ctx.workspace_root
    package_manager = detect_package_manager(workspace_root)
    package_snapshot = load_package_snapshot(workspace_root)

    runtime_requirements: dict[str, str] = {}
    dev_requirements: dict[str, str] = {}
    planned_files: list[PlannedFile] = []
    installed_components: list[ComponentExportSpec] = []
    type_exports: list[TypeExportSpec] = []
    missing_entries: list[str] = []

    for slug in install_order:
        record = component_map[slug]
        runtime_requirements.update(record.dependencies)
        dev_requirements.update(record.dev_dependencies)

        entry_paths: list[Path] = []
        fallback_entry: Path | None = None
        for file in record.files:
            contents = ctx.registry.fetch_component_file(file.path)
            destination = resolve_component_destination(workspace_root, config, file)
            existing = _read_existing(destination)
            if existing is None:
                status = PlannedFileStatus.CREATE
            elif existing == contents:
                status = PlannedFileStatus.UNCHANGED
            else:
                status = PlannedFileStatus.UPDATE
            planned_files.append(
                PlannedFile(
                    component_name=record.name,
                    registry_path=file.path,
                    destination=destination,
                    contents=contents,
                    existing_contents=existing,
                    status=status,
                )
            )

            if file.is_entry:
                entry_paths.append(destination)
            if fallback_entry is None and is_component_source(file):
                fallback_entry = destination
            if file.type_exports:
                type_exports.append(TypeExportSpec(export_names=file.type_exports, entry_path=destination))

        if not entry_paths and fallback_entry is not None:
            entry_paths.append(fallback_entry)
        if not entry_paths:
            missing_entries.append(record.name)
            continue
        for index, entry in enumerate(entry_paths):
            installed_components.append(
                ComponentExportSpec(export_name=entry_export_name(slug, entry, index), entry_path=entry)
            )

    logger.debug("planned %d files for %s", len(planned_files), ", ".join(install_order))
    barrel_path = workspace_path(workspace_root, config.exports.components.barrel)
    existing_barrel = ""
    if barrel_path.is_file():
        try:
            existing_barrel = barrel_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise WorkspaceIOError(barrel_path, str(exc)) from exc

    return AddPlan(
        config=config,
        config_path=ctx.config_path,
        workspace_root=workspace_root,
        requested_components=list(components),
        component_map=component_map,
        install_order=install_order,
        planned_files=planned_files,
        installed_components=installed_components,
        registered_type_exports=type_exports,
        runtime_requirements=dict(sorted(runtime_requirements.items())),
        dev_requirements=dict(sorted(dev_requirements.items())),
        barrel_path=barrel_path,
        existing_barrel=existing_barrel,
        package_manager=package_manager,
        package_snapshot=package_snapshot,
        missing_entry_components=missing_entries,
    )


def write_component_file(path: Path, contents: bytes, *, dry_run: bool = False) -> FileStatus:
    """Write ``contents`` unless the file on disk already matches."""
    existing = _read_existing(path)
    if existing is not None and existing == contents:
        return FileStatus.UNCHANGED
    if dry_run:
        return FileStatus.CREATED if existing is None else FileStatus.UPDATED
    if existing is None:
        write_new_file(path, contents)
        return FileStatus.CREATED
    replace_file(path, contents)
    return FileStatus.UPDATED


def apply(plan: AddPlan, *, dry_run: bool = False, installer: Installer | None = None) -> ApplyOutcome:
    files: list[FileApplyReport] = []
    for item in plan.planned_files:
        if not item.apply:
            status = FileStatus.SKIPPED
        else:
            status = write_component_file(item.destination, item.contents, dry_run=dry_run)
        files.append(FileApplyReport(destination=item.destination, component_name=item.component_name, status=status))

    rendered = render_component_barrel(
        plan.workspace_root,
        plan.config,
        plan.installed_components,
        plan.registered_type_exports,
        plan.existing_barrel,
    )
    exports_updated = rendered is not None
    if rendered is not None and not dry_run:
        data = rendered.encode("utf-8")
        if plan.barrel_path.exists():
            replace_file(plan.barrel_path, data)
        else:
            write_new_file(plan.barrel_path, data)

    runtime = reconcile_dependencies(
        plan.runtime_requirements,
        plan.package_snapshot,
        plan.package_manager,
        plan.workspace_root,
        dev=False,
        dry_run=dry_run,
        installer=installer,
    )
    dev = reconcile_dependencies(
        plan.dev_requirements,
        plan.package_snapshot,
        plan.package_manager,
        plan.workspace_root,
        dev=True,
        dry_run=dry_run,
        installer=installer,
    )
    return ApplyOutcome(files=files, exports_updated=exports_updated, runtime=runtime, dev=dev, dry_run=dry_run)
