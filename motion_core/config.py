"""``motion-core.json`` workspace configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError

CONFIG_FILE_NAME = "motion-core.json"
CONFIG_SCHEMA_URL = "https://motion-core.dev/registry/schema/config-schema.json"

DEFAULT_COMPONENTS_DIR = "src/lib/motion-core"
DEFAULT_COMPONENTS_IMPORT = "$lib/motion-core"


def _as_str(raw: Mapping[str, Any], key: str, default: str) -> str:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"`{key}` must be a string")
    return value


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"`{key}` must be an object")
    return value


@dataclass(frozen=True)
class TailwindEntry:
    css: str = "src/app.css"


@dataclass(frozen=True)
class AliasEntry:
    filesystem: str
    import_path: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None, default: "AliasEntry") -> "AliasEntry":
        if raw is None:
            return default
        return cls(
            filesystem=_as_str(raw, "filesystem", default.filesystem),
            import_path=_as_str(raw, "import", default.import_path),
        )

    def to_dict(self) -> dict[str, str]:
        return {"filesystem": self.filesystem, "import": self.import_path}


def _alias(suffix: str = "") -> AliasEntry:
    tail = f"/{suffix}" if suffix else ""
    return AliasEntry(
        filesystem=f"{DEFAULT_COMPONENTS_DIR}{tail}",
        import_path=f"{DEFAULT_COMPONENTS_IMPORT}{tail}",
    )


@dataclass(frozen=True)
class Aliases:
    components: AliasEntry = field(default_factory=_alias)
    helpers: AliasEntry = field(default_factory=lambda: _alias("helpers"))
    utils: AliasEntry = field(default_factory=lambda: _alias("utils"))
    assets: AliasEntry = field(default_factory=lambda: _alias("assets"))

    def entries(self) -> tuple[AliasEntry, ...]:
        return (self.components, self.helpers, self.utils, self.assets)


@dataclass(frozen=True)
class AliasPrefixes:
    components: str = DEFAULT_COMPONENTS_IMPORT


@dataclass(frozen=True)
class ExportEntry:
    barrel: str = f"{DEFAULT_COMPONENTS_DIR}/index.ts"
    strategy: str = "named"


@dataclass(frozen=True)
class Exports:
    components: ExportEntry = field(default_factory=ExportEntry)


@dataclass(frozen=True)
class Config:
    schema: str | None = CONFIG_SCHEMA_URL
    tailwind: TailwindEntry = field(default_factory=TailwindEntry)
    aliases: Aliases = field(default_factory=Aliases)
    alias_prefixes: AliasPrefixes = field(default_factory=AliasPrefixes)
    exports: Exports = field(default_factory=Exports)

    @classmethod
    def from_dict(cls, raw: Any) -> "Config":
        if not isinstance(raw, Mapping):
            raise ValueError("config root must be an object")
        defaults = cls()
        schema = raw.get("$schema")
        tailwind = _section(raw, "tailwind") or {}
        aliases = _section(raw, "aliases") or {}
        prefixes = _section(raw, "aliasPrefixes") or {}
        exports = _section(raw, "exports") or {}
        barrel = _section(exports, "components") or {}
        return cls(
            schema=str(schema) if schema is not None else None,
            tailwind=TailwindEntry(css=_as_str(tailwind, "css", defaults.tailwind.css)),
            aliases=Aliases(
                components=AliasEntry.from_dict(_section(aliases, "components"), defaults.aliases.components),
                helpers=AliasEntry.from_dict(_section(aliases, "helpers"), defaults.aliases.helpers),
                utils=AliasEntry.from_dict(_section(aliases, "utils"), defaults.aliases.utils),
                assets=AliasEntry.from_dict(_section(aliases, "assets"), defaults.aliases.assets),
            ),
            alias_prefixes=AliasPrefixes(
                components=_as_str(prefixes, "components", defaults.alias_prefixes.components)
            ),
            exports=Exports(
                components=ExportEntry(
                    barrel=_as_str(barrel, "barrel", defaults.exports.components.barrel),
                    strategy=_as_str(barrel, "strategy", defaults.exports.components.strategy),
                )
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.schema is not None:
            payload["$schema"] = self.schema
        payload["tailwind"] = {"css": self.tailwind.css}
        payload["aliases"] = {
            "components": self.aliases.components.to_dict(),
            "helpers": self.aliases.helpers.to_dict(),
            "utils": self.aliases.utils.to_dict(),
            "assets": self.aliases.assets.to_dict(),
        }
        payload["aliasPrefixes"] = {"components": self.alias_prefixes.components}
        payload["exports"] = {
            "components": {
                "barrel": self.exports.components.barrel,
                "strategy": self.exports.components.strategy,
            }
        }
        return payload


def load_config(path: Path) -> Config:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError("read", path, str(exc)) from exc
    try:
        return Config.from_dict(json.loads(text))
    except ValueError as exc:
        raise ConfigError("parse", path, str(exc)) from exc


def save_config(path: Path, config: Config) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError("write", path, str(exc)) from exc


def find_config(start_dir: Path) -> Path | None:
    """Walk from ``start_dir`` up to the file-system root looking for the config file."""
    current = start_dir.resolve()
    for candidate in (current, *current.parents):
        config_path = candidate / CONFIG_FILE_NAME
        if config_path.is_file():
            return config_path
    return None


def try_load_config(path: Path) -> Config | None:
    if not path.is_file():
        return None
    return load_config(path)
