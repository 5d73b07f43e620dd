"""Registry client serving the catalog and component sources.

Two backends sit behind :class:`RegistryClient`: a static in-memory catalog
and a remote HTTP registry fronted by :class:`~motion_core.registry.cache.RegistryCache`.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Callable, Protocol, TypeVar

import requests

from ..errors import (
    AssetDecodeError,
    AssetNotFoundError,
    RegistryError,
    RegistryNetworkError,
    RegistryNotFoundError,
    RegistryParseError,
)
from .cache import CacheStore, ManifestKind, RegistryCache
from .models import BaseDependencies, ComponentRecord, Registry, RegistryComponent, RegistrySummary

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 15
USER_AGENT = "motion-core-cli"

T = TypeVar("T")


class HttpSession(Protocol):
    def get(self, url: str, **kwargs: Any) -> Any: ...


class _ComponentManifest:
    """Two-state memo: unloaded until the first load or an explicit preload."""

    def __init__(self) -> None:
        self._files: dict[str, str] | None = None

    @property
    def loaded(self) -> bool:
        return self._files is not None

    def get(self) -> dict[str, str] | None:
        return self._files

    def set(self, files: dict[str, str]) -> None:
        self._files = dict(files)


class StaticBackend:
    def __init__(self, registry: Registry) -> None:
        self.registry = registry


class RemoteBackend:
    def __init__(
        self,
        base_url: str,
        cache: RegistryCache,
        *,
        session: HttpSession | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, name: str) -> str:
        return f"{self.base_url}/{name}"

    def fetch(self, name: str) -> bytes:
        url = self._url(name)
        try:
            response = self.session.get(url, timeout=self.timeout, headers={"User-Agent": USER_AGENT})
        except requests.RequestException as exc:
            raise RegistryNetworkError(str(exc)) from exc
        if response.status_code == 404:
            raise RegistryNotFoundError(url)
        if response.status_code >= 400:
            logger.warning("registry responded with status %s for %s", response.status_code, url)
            raise RegistryNetworkError(f"unexpected status {response.status_code} for {url}")
        return response.content


class RegistryClient:
    def __init__(self, backend: StaticBackend | RemoteBackend) -> None:
        self._backend = backend
        self._components = _ComponentManifest()

    @classmethod
    def from_registry(cls, registry: Registry) -> "RegistryClient":
        return cls(StaticBackend(registry))

    @classmethod
    def from_url(
        cls,
        base_url: str,
        cache_store: CacheStore,
        *,
        session: HttpSession | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> "RegistryClient":
        cache = cache_store.scoped(base_url)
        return cls(RemoteBackend(base_url, cache, session=session, timeout=timeout))

    @property
    def base_url(self) -> str | None:
        if isinstance(self._backend, RemoteBackend):
            return self._backend.base_url
        return None

    @property
    def cache(self) -> RegistryCache | None:
        if isinstance(self._backend, RemoteBackend):
            return self._backend.cache
        return None

    def load_registry(self) -> Registry:
        backend = self._backend
        if isinstance(backend, StaticBackend):
            return backend.registry
        return self._load_manifest(backend, ManifestKind.REGISTRY, "registry manifest", _parse_registry)

    def list_components(self) -> list[RegistryComponent]:
        registry = self.load_registry()
        return [
            RegistryComponent(slug=slug, component=registry.components[slug])
            for slug in sorted(registry.components)
        ]

    def get_component(self, slug: str) -> ComponentRecord | None:
        return self.load_registry().components.get(slug)

    def summary(self) -> RegistrySummary:
        registry = self.load_registry()
        return RegistrySummary(
            name=registry.name,
            version=registry.version,
            description=registry.description,
            component_count=len(registry.components),
        )

    def base_dependencies(self) -> BaseDependencies:
        registry = self.load_registry()
        return BaseDependencies(
            dependencies=dict(registry.base_dependencies),
            dev_dependencies=dict(registry.base_dev_dependencies),
        )

    def preload_component_manifest(self, files: dict[str, str]) -> None:
        self._components.set(files)

    def fetch_component_file(self, path: str) -> bytes:
        manifest = self._component_manifest()
        encoded = manifest.get(path)
        if encoded is None:
            raise AssetNotFoundError(path)
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AssetDecodeError(path, str(exc)) from exc

    def _component_manifest(self) -> dict[str, str]:
        files = self._components.get()
        if files is not None:
            return files
        backend = self._backend
        if isinstance(backend, StaticBackend):
            files = {}
        else:
            files = self._load_manifest(
                backend, ManifestKind.COMPONENTS, "component manifest", _parse_component_manifest
            )
        self._components.set(files)
        return files

    def _load_manifest(
        self,
        backend: RemoteBackend,
        kind: ManifestKind,
        label: str,
        parse: Callable[[bytes], T],
    ) -> T:
        cached = backend.cache.read(kind)
        if cached is not None:
            try:
                value = parse(cached.data)
            except RegistryParseError as exc:
                logger.debug("ignoring unparseable cached %s: %s", label, exc)
            else:
                logger.debug("using cached %s from %s", label, backend.cache.path_for(kind))
                return value

        try:
            data = backend.fetch(kind.value)
        except RegistryError as exc:
            if not exc.transient:
                raise
            stale = backend.cache.read(kind, allow_stale=True)
            if stale is None:
                raise RegistryNetworkError(f"failed to fetch {label}") from exc
            logger.warning("serving stale %s after fetch failure: %s", label, exc)
            return parse(stale.data)

        backend.cache.write(kind, data)
        return parse(data)


def _load_json(data: bytes) -> Any:
    try:
        return json.loads(data)
    except ValueError as exc:
        raise RegistryParseError(str(exc)) from exc


def _parse_registry(data: bytes) -> Registry:
    return Registry.from_dict(_load_json(data))


def _parse_component_manifest(data: bytes) -> dict[str, str]:
    payload = _load_json(data)
    if not isinstance(payload, dict) or not all(isinstance(value, str) for value in payload.values()):
        raise RegistryParseError("component manifest must map paths to base64 strings")
    return {str(key): value for key, value in payload.items()}
