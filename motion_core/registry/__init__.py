"""Registry catalog access and manifest caching."""

from .cache import CacheInfo, CacheStore, CachedData, ManifestKind, RegistryCache, cache_namespace
from .client import RegistryClient, RemoteBackend, StaticBackend
from .models import (
    BaseDependencies,
    ComponentFileRecord,
    ComponentPreview,
    ComponentRecord,
    Registry,
    RegistryComponent,
    RegistrySummary,
)

__all__ = [
    "BaseDependencies",
    "CacheInfo",
    "CacheStore",
    "CachedData",
    "ComponentFileRecord",
    "ComponentPreview",
    "ComponentRecord",
    "ManifestKind",
    "Registry",
    "RegistryCache",
    "RegistryClient",
    "RegistryComponent",
    "RegistrySummary",
    "RemoteBackend",
    "StaticBackend",
    "cache_namespace",
]
