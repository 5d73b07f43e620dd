"""Workspace scaffolding and Tailwind token injection used by ``init``."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .config import Config
from .errors import (
    HelperDecodeError,
    HelperDownloadError,
    RegistryError,
    TailwindTokensEmptyError,
    TailwindTokensInvalidUtf8Error,
    WorkspaceIOError,
)
from .fsutil import replace_file, write_new_file
from .paths import relative_display, workspace_path
from .registry import CacheStore, ManifestKind, RegistryClient

logger = logging.getLogger(__name__)

CSS_TOKEN_REGISTRY_PATH = "tokens/motion-core.css"
CSS_TOKEN_SENTINEL = "@utility card-highlight"
CN_HELPER_PATH = "utils/cn.ts"
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")


@dataclass
class ScaffoldReport:
    directories: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    def any(self) -> bool:
        return bool(self.directories or self.files)


class TailwindSyncState(str, Enum):
    MISSING_CONFIG = "missing_config"
    MISSING_FILE = "missing_file"
    ALREADY_PRESENT = "already_present"
    DRY_RUN = "dry_run"
    UPDATED = "updated"


@dataclass(frozen=True)
class TailwindSyncStatus:
    state: TailwindSyncState
    target: str | None = None

    @property
    def updated(self) -> bool:
        return self.state is TailwindSyncState.UPDATED


def scaffold_workspace(
    workspace_root: Path,
    config: Config,
    registry: RegistryClient,
    cache_store: CacheStore,
    *,
    dry_run: bool = False,
) -> ScaffoldReport:
    report = ScaffoldReport()
    aliases = config.aliases
    for entry in aliases.entries():
        directory = workspace_path(workspace_root, entry.filesystem)
        if _ensure_directory(directory, dry_run):
            report.directories.append(relative_display(workspace_root, directory))

    cn_path = workspace_path(workspace_root, aliases.utils.filesystem) / "cn.ts"
    if not cn_path.exists():
        if not dry_run:
            write_new_file(cn_path, _fetch_cn_helper(registry, cache_store).encode("utf-8"))
        report.files.append(relative_display(workspace_root, cn_path))
    return report


def _ensure_directory(path: Path, dry_run: bool) -> bool:
    if path.exists():
        return False
    if dry_run:
        return True
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WorkspaceIOError(path, str(exc)) from exc
    return True


def _fetch_cn_helper(registry: RegistryClient, cache_store: CacheStore) -> str:
    try:
        data = registry.fetch_component_file(CN_HELPER_PATH)
    except RegistryError as primary:
        data = _cn_helper_from_cache(registry, cache_store)
        if data is None:
            raise HelperDownloadError(CN_HELPER_PATH, primary) from primary
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HelperDecodeError(CN_HELPER_PATH, str(exc)) from exc


def _cn_helper_from_cache(registry: RegistryClient, cache_store: CacheStore) -> bytes | None:
    base_url = registry.base_url
    if base_url is None:
        return None
    cached = cache_store.scoped(base_url).read(ManifestKind.COMPONENTS, allow_stale=True)
    if cached is None:
        return None
    try:
        manifest = json.loads(cached.data)
    except ValueError:
        return None
    if not isinstance(manifest, dict):
        return None
    logger.info("recovering %s from cached component manifest", CN_HELPER_PATH)
    registry.preload_component_manifest({str(key): str(value) for key, value in manifest.items()})
    try:
        return registry.fetch_component_file(CN_HELPER_PATH)
    except RegistryError:
        return None


def sync_tailwind_tokens(
    workspace_root: Path,
    config: Config,
    registry: RegistryClient,
    *,
    dry_run: bool = False,
) -> TailwindSyncStatus:
    css_path = config.tailwind.css.strip()
    if not css_path:
        return TailwindSyncStatus(TailwindSyncState.MISSING_CONFIG)

    target = workspace_path(workspace_root, css_path)
    display = relative_display(workspace_root, target)
    if not target.exists():
        return TailwindSyncStatus(TailwindSyncState.MISSING_FILE, display)

    try:
        existing = target.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise WorkspaceIOError(target, str(exc)) from exc
    if CSS_TOKEN_SENTINEL in existing:
        return TailwindSyncStatus(TailwindSyncState.ALREADY_PRESENT, display)

    try:
        tokens_source = registry.fetch_component_file(CSS_TOKEN_REGISTRY_PATH).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TailwindTokensInvalidUtf8Error(str(exc)) from exc

    import_line, body = split_token_bundle(tokens_source)
    body = trim_token_body(body)
    if not body:
        raise TailwindTokensEmptyError()

    updated = inject_tokens(existing, import_line, body)
    if dry_run:
        return TailwindSyncStatus(TailwindSyncState.DRY_RUN, display)

    replace_file(target, updated.encode("utf-8"))
    return TailwindSyncStatus(TailwindSyncState.UPDATED, display)


def split_token_bundle(source: str) -> tuple[str | None, str]:
    """Separate a leading ``@import`` line from the token body."""
    text = source.lstrip("\ufeff")
    if not text.lstrip().startswith("@import"):
        return None, text
    line, sep, rest = text.partition("\n")
    if not sep:
        return text.strip(), ""
    return line.strip(), rest


def trim_token_body(body: str) -> str:
    return body.lstrip("\r\n").rstrip("\r\n")


def detect_newline(contents: str) -> str:
    return "\r\n" if "\r\n" in contents else "\n"


def find_import_insertion_index(contents: str) -> int:
    """Offset just past the last ``@import`` line, or 0 when there is none."""
    last = 0
    for match in _LINE_RE.finditer(contents):
        if match.group(0).lstrip().startswith("@import"):
            last = match.end()
    return last


def has_tailwind_import(contents: str) -> bool:
    for line in contents.splitlines():
        stripped = line.lstrip()
        if stripped.startswith("@import") and "tailwindcss" in stripped:
            return True
    return False


def inject_tokens(existing: str, import_line: str | None, body: str) -> str:
    newline = detect_newline(existing)
    index = find_import_insertion_index(existing)
    prefix, suffix = existing[:index], existing[index:]
    if newline == "\r\n":
        body = body.replace("\r\n", "\n").replace("\n", newline)

    block = ""
    if import_line and not has_tailwind_import(existing):
        block = import_line.strip() + newline + newline
    block += body
    if not block.endswith(newline):
        block += newline

    updated = prefix
    if prefix and not prefix.endswith(newline + newline):
        updated += newline if prefix.endswith(newline) else newline + newline
    updated += block
    if suffix and not updated.endswith(newline):
        updated += newline
    return updated + suffix
