"""Runtime settings resolved once from the process environment."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_REGISTRY_URL = "https://motion-core.dev/registry"
DEFAULT_REGISTRY_TTL_MS = 600_000
DEFAULT_ASSET_TTL_MS = 86_400_000

REGISTRY_URL_ENV = "MOTION_CORE_REGISTRY_URL"
CACHE_DIR_ENV = "MOTION_CORE_CACHE_DIR"
REGISTRY_TTL_ENV = "MOTION_CORE_CACHE_TTL_MS"
ASSET_TTL_ENV = "MOTION_CORE_ASSET_CACHE_TTL_MS"
ASSUME_YES_ENV = "MOTION_CORE_CLI_ASSUME_YES"
LOG_LEVEL_ENV = "MOTION_CORE_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    registry_url: str = DEFAULT_REGISTRY_URL
    cache_dir: Path = Path(tempfile.gettempdir()) / "motion-core"
    registry_ttl_seconds: float = DEFAULT_REGISTRY_TTL_MS / 1000.0
    asset_ttl_seconds: float = DEFAULT_ASSET_TTL_MS / 1000.0
    assume_yes: bool = False
    ci: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        registry_url = str(env.get(REGISTRY_URL_ENV) or "").strip() or DEFAULT_REGISTRY_URL
        return cls(
            registry_url=registry_url,
            cache_dir=_resolve_cache_dir(env),
            registry_ttl_seconds=_read_ttl_seconds(env, REGISTRY_TTL_ENV, DEFAULT_REGISTRY_TTL_MS),
            asset_ttl_seconds=_read_ttl_seconds(env, ASSET_TTL_ENV, DEFAULT_ASSET_TTL_MS),
            assume_yes=ASSUME_YES_ENV in env,
            ci="CI" in env,
            log_level=str(env.get(LOG_LEVEL_ENV) or "WARNING").strip().upper() or "WARNING",
        )


def _resolve_cache_dir(env: Mapping[str, str]) -> Path:
    explicit = str(env.get(CACHE_DIR_ENV) or "").strip()
    if explicit:
        return Path(explicit)
    xdg = str(env.get("XDG_CACHE_HOME") or "").strip()
    if xdg:
        return Path(xdg) / "motion-core"
    local_app_data = str(env.get("LOCALAPPDATA") or "").strip()
    if local_app_data:
        return Path(local_app_data) / "motion-core"
    try:
        return Path.home() / ".cache" / "motion-core"
    except RuntimeError:
        return Path(tempfile.gettempdir()) / "motion-core"


def _read_ttl_seconds(env: Mapping[str, str], name: str, default_ms: int) -> float:
    raw = str(env.get(name) or "").strip()
    try:
        value = int(raw)
    except ValueError:
        return default_ms / 1000.0
    if value < 0:
        return default_ms / 1000.0
    return value / 1000.0
