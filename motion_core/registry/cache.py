"""On-disk cache for registry manifests, partitioned per registry source."""

from __future__ import annotations

import base64
import logging
import shutil
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..errors import WorkspaceIOError
from ..settings import DEFAULT_ASSET_TTL_MS, DEFAULT_REGISTRY_TTL_MS, Settings

logger = logging.getLogger(__name__)

STALE_MAX_AGE_SECONDS = 30 * 24 * 60 * 60.0


class ManifestKind(str, Enum):
    REGISTRY = "registry.json"
    COMPONENTS = "components.json"


@dataclass(frozen=True)
class CachedData:
    data: bytes
    fresh: bool


@dataclass(frozen=True)
class CacheInfo:
    path: Path
    registry_ttl_seconds: float
    asset_ttl_seconds: float


def cache_namespace(source: str) -> str:
    encoded = base64.urlsafe_b64encode(source.encode("utf-8")).decode("ascii").rstrip("=")
    return f"registry-{encoded}"


class CacheStore:
    def __init__(
        self,
        root: Path,
        *,
        registry_ttl_seconds: float = DEFAULT_REGISTRY_TTL_MS / 1000.0,
        asset_ttl_seconds: float = DEFAULT_ASSET_TTL_MS / 1000.0,
    ) -> None:
        self.root = Path(root)
        self.registry_ttl_seconds = registry_ttl_seconds
        self.asset_ttl_seconds = asset_ttl_seconds
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("unable to create cache directory %s: %s", self.root, exc)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheStore":
        return cls(
            settings.cache_dir,
            registry_ttl_seconds=settings.registry_ttl_seconds,
            asset_ttl_seconds=settings.asset_ttl_seconds,
        )

    def info(self) -> CacheInfo:
        return CacheInfo(
            path=self.root,
            registry_ttl_seconds=self.registry_ttl_seconds,
            asset_ttl_seconds=self.asset_ttl_seconds,
        )

    def scoped(self, source: str) -> "RegistryCache":
        return RegistryCache(self.root / cache_namespace(source), self)

    def clear(self) -> None:
        try:
            if self.root.exists():
                shutil.rmtree(self.root)
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceIOError(self.root, str(exc)) from exc


class RegistryCache:
    """Manifest files for a single registry source."""

    def __init__(self, root: Path, store: CacheStore) -> None:
        self.root = root
        self._store = store

    def path_for(self, kind: ManifestKind) -> Path:
        return self.root / kind.value

    def ttl_for(self, kind: ManifestKind) -> float:
        if kind is ManifestKind.REGISTRY:
            return self._store.registry_ttl_seconds
        return self._store.asset_ttl_seconds

    def read(self, kind: ManifestKind, *, allow_stale: bool = False) -> CachedData | None:
        path = self.path_for(kind)
        try:
            stat = path.stat()
        except OSError:
            return None
        # mtimes slightly ahead of the wall clock count as just written
        age = max(time.time() - stat.st_mtime, 0.0)
        fresh = age <= self.ttl_for(kind)
        if not fresh and (not allow_stale or age > STALE_MAX_AGE_SECONDS):
            return None
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.debug("unable to read cache entry %s: %s", path, exc)
            return None
        return CachedData(data=data, fresh=fresh)

    def write(self, kind: ManifestKind, data: bytes) -> None:
        path = self.path_for(kind)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            logger.warning("failed to write cache entry %s: %s", path, exc)
