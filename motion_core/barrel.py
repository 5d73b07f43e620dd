"""Generated ``index.ts`` barrel that re-exports installed components."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Sequence

from .config import Config
from .paths import workspace_path

_COMPONENT_PREFIX = "export { default as "
_TYPE_PREFIX = "export type {"


@dataclass(frozen=True)
class ComponentExportSpec:
    export_name: str
    entry_path: Path


@dataclass(frozen=True)
class TypeExportSpec:
    export_names: tuple[str, ...]
    entry_path: Path


def component_line(name: str, import_path: str) -> str:
    return f'export {{ default as {name} }} from "{import_path}";'


def type_line(name: str, import_path: str) -> str:
    return f'export type {{ {name} }} from "{import_path}";'


@dataclass
class BarrelExports:
    components: dict[str, str] = field(default_factory=dict)
    types: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "BarrelExports":
        exports = cls()
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if line.startswith(_COMPONENT_PREFIX):
                name, sep, remainder = line[len(_COMPONENT_PREFIX):].partition(" } from ")
                if sep:
                    exports.components[name.strip()] = component_line(name.strip(), _clean_source(remainder))
            elif line.startswith(_TYPE_PREFIX):
                names, sep, remainder = line[len(_TYPE_PREFIX):].partition("} from ")
                if not sep:
                    continue
                source = _clean_source(remainder)
                for name in (value.strip() for value in names.split(",")):
                    if name:
                        exports.types[name] = type_line(name, source)
        return exports

    def is_empty(self) -> bool:
        return not self.components and not self.types

    def render(self) -> str:
        lines = [self.components[name] for name in sorted(self.components)]
        lines.extend(self.types[name] for name in sorted(self.types))
        return "".join(f"{line}\n" for line in lines)


def _clean_source(remainder: str) -> str:
    text = remainder.strip()
    if text.endswith('";'):
        text = text[:-2]
    return text.lstrip('"')


def _to_slash(path: PurePath) -> str:
    return "/".join(path.parts)


def compute_import_path(workspace_root: Path, barrel_dir: Path, components_dir: str, entry_path: Path) -> str | None:
    """Import specifier for ``entry_path`` as seen from the barrel."""
    components_root = workspace_path(workspace_root, components_dir)
    try:
        relative = entry_path.relative_to(components_root)
    except ValueError:
        pass
    else:
        return f"./{_to_slash(relative)}"

    try:
        relative_text = os.path.relpath(entry_path, barrel_dir)
    except ValueError:
        return None
    path_text = _to_slash(PurePath(relative_text))
    if path_text.startswith("."):
        return path_text
    return f"./{path_text}"


def render_component_barrel(
    workspace_root: Path,
    config: Config,
    components: Sequence[ComponentExportSpec],
    type_exports: Sequence[TypeExportSpec],
    existing: str,
) -> str | None:
    """Merge exports into ``existing`` barrel text.

    Returns the new text, or None when no export line changed. Lines are
    sorted by exported identifier so repeated installs are no-ops.
    """
    if not components and not type_exports:
        return None

    exports = BarrelExports.parse(existing)
    barrel_path = workspace_path(workspace_root, config.exports.components.barrel)
    barrel_dir = barrel_path.parent if barrel_path != workspace_root else workspace_root
    components_dir = config.aliases.components.filesystem
    modified = False

    for component in components:
        import_path = compute_import_path(workspace_root, barrel_dir, components_dir, component.entry_path)
        if import_path is None:
            continue
        line = component_line(component.export_name, import_path)
        if exports.components.get(component.export_name) != line:
            exports.components[component.export_name] = line
            modified = True

    for type_entry in type_exports:
        import_path = compute_import_path(workspace_root, barrel_dir, components_dir, type_entry.entry_path)
        if import_path is None:
            continue
        for name in type_entry.export_names:
            if not name:
                continue
            line = type_line(name, import_path)
            if exports.types.get(name) != line:
                exports.types[name] = line
                modified = True

    if modified and not exports.is_empty():
        return exports.render()
    return None
