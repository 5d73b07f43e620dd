"""Where registry component files land and what the barrel exports for them."""

from __future__ import annotations

import re
from pathlib import Path

from .config import Config
from .paths import sanitize_relative_path, workspace_path
from .registry.models import ComponentFileRecord

COMPONENT_EXTENSION = ".svelte"
_CATEGORY_DIRS = ("components", "helpers", "utils", "assets")
_WORD_SPLIT_RE = re.compile(r"[^A-Za-z0-9]+")


def strip_category(path: str) -> str:
    """Drop a leading category directory already implied by the target alias."""
    normalized = path.replace("\\", "/").lstrip("/")
    head, sep, rest = normalized.partition("/")
    if sep and head in _CATEGORY_DIRS:
        return rest
    return normalized


def resolve_component_destination(workspace_root: Path, config: Config, file: ComponentFileRecord) -> Path:
    relative = sanitize_relative_path(strip_category(file.path))
    target = (file.target or "").strip().lower()
    if target in ("helper", "helpers"):
        base = workspace_path(workspace_root, config.aliases.helpers.filesystem)
    elif target == "utils":
        base = workspace_path(workspace_root, config.aliases.utils.filesystem)
    elif target in ("asset", "assets"):
        base = workspace_path(workspace_root, config.aliases.assets.filesystem)
    elif target == "root":
        base = workspace_root
    else:
        base = workspace_path(workspace_root, config.aliases.components.filesystem)
    if not relative.parts:
        return base
    return base / relative


def format_export_name(value: str) -> str:
    """PascalCase ``value``: ``glass-pane`` -> ``GlassPane``."""
    return "".join(part[:1].upper() + part[1:] for part in _WORD_SPLIT_RE.split(value) if part)


def is_component_source(file: ComponentFileRecord) -> bool:
    return file.path.endswith(COMPONENT_EXTENSION)


def entry_export_name(slug: str, entry_path: Path, index: int) -> str:
    """The first entry is named after the slug, later ones after their file stem."""
    if index == 0:
        return format_export_name(slug)
    return format_export_name(entry_path.stem) or format_export_name(f"{slug}_{index}")
