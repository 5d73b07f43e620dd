"""Typed views over the registry catalog JSON."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..errors import RegistryParseError


def _string_map(raw: Any, label: str) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise RegistryParseError(f"`{label}` must be an object")
    return {str(key): str(value) for key, value in sorted(raw.items())}


def _string_list(raw: Any, label: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise RegistryParseError(f"`{label}` must be an array")
    return tuple(str(item) for item in raw)


def _optional_str(raw: Any) -> str | None:
    return None if raw is None else str(raw)


@dataclass(frozen=True)
class ComponentFileRecord:
    path: str
    target: str | None = None
    kind: str | None = None
    type_exports: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: Any) -> "ComponentFileRecord":
        if not isinstance(raw, Mapping) or not isinstance(raw.get("path"), str):
            raise RegistryParseError("component file entries require a string `path`")
        return cls(
            path=raw["path"],
            target=_optional_str(raw.get("target")),
            kind=_optional_str(raw.get("kind")),
            type_exports=_string_list(raw.get("typeExports"), "typeExports"),
        )

    @property
    def is_entry(self) -> bool:
        return self.kind == "entry"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"path": self.path}
        for key in ("target", "kind"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        if self.type_exports:
            payload["typeExports"] = list(self.type_exports)
        return payload


@dataclass(frozen=True)
class ComponentPreview:
    video: str | None = None
    poster: str | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> "ComponentPreview | None":
        if not isinstance(raw, Mapping):
            return None
        return cls(video=_optional_str(raw.get("video")), poster=_optional_str(raw.get("poster")))

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in (("video", self.video), ("poster", self.poster)) if value is not None}


@dataclass(frozen=True)
class ComponentRecord:
    name: str
    description: str | None = None
    category: str | None = None
    files: tuple[ComponentFileRecord, ...] = ()
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    internal_dependencies: tuple[str, ...] = ()
    preview: ComponentPreview | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> "ComponentRecord":
        if not isinstance(raw, Mapping) or not isinstance(raw.get("name"), str):
            raise RegistryParseError("component entries require a string `name`")
        files = raw.get("files") or []
        if not isinstance(files, list):
            raise RegistryParseError("`files` must be an array")
        return cls(
            name=raw["name"],
            description=_optional_str(raw.get("description")),
            category=_optional_str(raw.get("category")),
            files=tuple(ComponentFileRecord.from_dict(item) for item in files),
            dependencies=_string_map(raw.get("dependencies"), "dependencies"),
            dev_dependencies=_string_map(raw.get("devDependencies"), "devDependencies"),
            internal_dependencies=_string_list(raw.get("internalDependencies"), "internalDependencies"),
            preview=ComponentPreview.from_dict(raw.get("preview")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            payload["description"] = self.description
        if self.category is not None:
            payload["category"] = self.category
        payload["files"] = [item.to_dict() for item in self.files]
        payload["dependencies"] = dict(self.dependencies)
        payload["devDependencies"] = dict(self.dev_dependencies)
        payload["internalDependencies"] = list(self.internal_dependencies)
        if self.preview is not None:
            payload["preview"] = self.preview.to_dict()
        return payload


@dataclass(frozen=True)
class Registry:
    name: str
    version: str
    components: dict[str, ComponentRecord]
    description: str | None = None
    base_dependencies: dict[str, str] = field(default_factory=dict)
    base_dev_dependencies: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> "Registry":
        if not isinstance(raw, Mapping):
            raise RegistryParseError("registry manifest must be a JSON object")
        for key in ("name", "version"):
            if not isinstance(raw.get(key), str):
                raise RegistryParseError(f"registry manifest requires a string `{key}`")
        components = raw.get("components")
        if not isinstance(components, Mapping):
            raise RegistryParseError("registry manifest requires a `components` object")
        return cls(
            name=raw["name"],
            version=raw["version"],
            description=_optional_str(raw.get("description")),
            components={str(slug): ComponentRecord.from_dict(item) for slug, item in components.items()},
            base_dependencies=_string_map(raw.get("baseDependencies"), "baseDependencies"),
            base_dev_dependencies=_string_map(raw.get("baseDevDependencies"), "baseDevDependencies"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.description is not None:
            payload["description"] = self.description
        payload["components"] = {slug: record.to_dict() for slug, record in self.components.items()}
        payload["baseDependencies"] = dict(self.base_dependencies)
        payload["baseDevDependencies"] = dict(self.base_dev_dependencies)
        return payload


@dataclass(frozen=True)
class RegistryComponent:
    slug: str
    component: ComponentRecord


@dataclass(frozen=True)
class RegistrySummary:
    name: str
    version: str
    description: str | None
    component_count: int


@dataclass(frozen=True)
class BaseDependencies:
    dependencies: dict[str, str]
    dev_dependencies: dict[str, str]
