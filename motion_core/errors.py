"""Exception hierarchy shared by the Motion Core library and CLI."""

from __future__ import annotations

from pathlib import Path


class MotionCoreError(RuntimeError):
    """Base class for every error raised by motion_core."""


class ConfigError(MotionCoreError):
    def __init__(self, action: str, path: Path, detail: str) -> None:
        super().__init__(f"failed to {action} config at {path}: {detail}")
        self.action = action
        self.path = path


class RegistryError(MotionCoreError):
    """Registry failures. ``transient`` marks errors that may be served from a stale cache."""

    transient = False


class RegistryNetworkError(RegistryError):
    transient = True

    def __init__(self, detail: str) -> None:
        super().__init__(f"network error: {detail}")


class RegistryNotFoundError(RegistryError):
    def __init__(self, url: str) -> None:
        super().__init__(f"registry not found at {url}")
        self.url = url


class RegistryParseError(RegistryError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"failed to parse registry: {detail}")


class AssetNotFoundError(RegistryError):
    def __init__(self, path: str) -> None:
        super().__init__(f"component asset `{path}` not found in manifest")
        self.path = path


class AssetDecodeError(RegistryError):
    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"failed to decode component asset `{path}`: {detail}")
        self.path = path


class WorkspaceIOError(MotionCoreError):
    """File-system failure tagged with the offending path."""

    def __init__(self, path: Path | str, detail: str) -> None:
        super().__init__(f"I/O error at {path}: {detail}")
        self.path = Path(path)


class WorkspaceError(MotionCoreError):
    pass


class HelperDownloadError(WorkspaceError):
    def __init__(self, path: str, source: Exception) -> None:
        super().__init__(f"failed to download helper `{path}`: {source}")
        self.path = path


class HelperDecodeError(WorkspaceError):
    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"failed to decode helper `{path}`: {detail}")
        self.path = path


class TailwindTokensEmptyError(WorkspaceError):
    def __init__(self) -> None:
        super().__init__("tailwind token payload is empty")


class TailwindTokensInvalidUtf8Error(WorkspaceError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"tailwind token bundle invalid UTF-8: {detail}")


class PackageManagerError(MotionCoreError):
    pass


class AddError(MotionCoreError):
    pass


class MissingConfigError(AddError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"no motion-core.json found at {path}")
        self.path = path


class ComponentNotFoundError(AddError):
    def __init__(self, slug: str) -> None:
        super().__init__(f"component `{slug}` not found in registry")
        self.slug = slug


class InitError(MotionCoreError):
    pass


class PackageJsonError(InitError):
    pass


class UnsupportedSvelteError(InitError):
    def __init__(self, found: str | None) -> None:
        super().__init__(f"Svelte >=5 is required. Found {found or 'none'}.")
        self.found = found


class CacheConfirmationRequired(MotionCoreError):
    def __init__(self) -> None:
        super().__init__("use --force to confirm cache clearing (files will be deleted from disk)")
