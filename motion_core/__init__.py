"""Motion Core: install animated Svelte components from the Motion Core registry."""

from .config import CONFIG_FILE_NAME, Config, load_config, save_config
from .context import CommandContext
from .errors import MotionCoreError
from .paths import sanitize_relative_path, workspace_path
from .registry import CacheStore, Registry, RegistryClient
from .settings import Settings
from .versions import spec_satisfies

__version__ = "0.1.0"

__all__ = [
    "CONFIG_FILE_NAME",
    "CacheStore",
    "CommandContext",
    "Config",
    "MotionCoreError",
    "Registry",
    "RegistryClient",
    "Settings",
    "load_config",
    "sanitize_relative_path",
    "save_config",
    "spec_satisfies",
    "workspace_path",
    "__version__",
]
