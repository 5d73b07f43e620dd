"""Inspection of the host project's ``package.json``."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import PackageJsonError

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
_PREFIXES = ("workspace:", "file:")
_MAJOR_RE = re.compile(r"\d+")


def _string_map(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(key): str(value) for key, value in raw.items() if isinstance(value, str)}


@dataclass(frozen=True)
class PackageSnapshot:
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "PackageSnapshot":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            dependencies=_string_map(raw.get("dependencies")),
            dev_dependencies=_string_map(raw.get("devDependencies")),
        )

    def spec_for(self, name: str) -> str | None:
        if name in self.dependencies:
            return self.dependencies[name]
        return self.dev_dependencies.get(name)


def read_package_json(workspace_root: Path) -> dict[str, Any]:
    path = workspace_root / PACKAGE_JSON
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise PackageJsonError(f"package.json not found in {workspace_root}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise PackageJsonError(f"failed to read {path}: {exc}") from exc
    except ValueError as exc:
        raise PackageJsonError(f"invalid package.json: {exc}") from exc
    if not isinstance(payload, dict):
        raise PackageJsonError("invalid package.json: root must be an object")
    return payload


def load_package_snapshot(workspace_root: Path) -> PackageSnapshot | None:
    """Best-effort snapshot; a missing or broken package.json yields None."""
    try:
        return PackageSnapshot.from_dict(read_package_json(workspace_root))
    except PackageJsonError as exc:
        logger.debug("package snapshot unavailable: %s", exc)
        return None


class FrameworkKind(str, Enum):
    SVELTEKIT = "sveltekit"
    VITE_SVELTE = "vite-svelte"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        if self is FrameworkKind.SVELTEKIT:
            return "SvelteKit"
        if self is FrameworkKind.VITE_SVELTE:
            return "Vite + Svelte"
        return "unknown framework"


@dataclass(frozen=True)
class FrameworkDetection:
    framework: FrameworkKind
    svelte_version: str | None = None
    tailwind_version: str | None = None

    @property
    def is_svelte_supported(self) -> bool:
        major = parse_major(self.svelte_version)
        return major is not None and major >= 5

    @property
    def tailwind_supported(self) -> bool:
        major = parse_major(self.tailwind_version)
        return major is not None and major >= 4


def detect_framework(workspace_root: Path) -> FrameworkDetection:
    snapshot = PackageSnapshot.from_dict(read_package_json(workspace_root))
    if snapshot.spec_for("@sveltejs/kit") is not None:
        framework = FrameworkKind.SVELTEKIT
    elif (
        snapshot.spec_for("@sveltejs/vite-plugin-svelte") is not None
        or snapshot.spec_for("@sveltejs/adapter-auto") is not None
    ):
        framework = FrameworkKind.VITE_SVELTE
    else:
        framework = FrameworkKind.UNKNOWN
    return FrameworkDetection(
        framework=framework,
        svelte_version=snapshot.spec_for("svelte"),
        tailwind_version=snapshot.spec_for("tailwindcss"),
    )


def parse_major(spec: str | None) -> int | None:
    """Major version of a dependency spec such as ``^5.1.0`` or ``workspace:~4``."""
    if spec is None:
        return None
    text = spec.strip()
    for prefix in _PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):]
    match = _MAJOR_RE.search(text)
    if match is None:
        return None
    return int(match.group(0))
