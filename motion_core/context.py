"""Per-invocation context shared by the operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE_NAME, Config, find_config, try_load_config
from .registry import CacheStore, RegistryClient


@dataclass
class CommandContext:
    workspace_root: Path
    config_path: Path
    registry: RegistryClient
    cache_store: CacheStore

    @classmethod
    def discover(
        cls,
        start_dir: Path,
        registry: RegistryClient,
        cache_store: CacheStore,
    ) -> "CommandContext":
        """Root the context at the nearest directory holding a config, or ``start_dir``."""
        config_path = find_config(start_dir)
        if config_path is None:
            root = start_dir.resolve()
            config_path = root / CONFIG_FILE_NAME
        else:
            root = config_path.parent
        return cls(workspace_root=root, config_path=config_path, registry=registry, cache_store=cache_store)

    def load_config(self) -> Config | None:
        return try_load_config(self.config_path)
