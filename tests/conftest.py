from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Any

import pytest

from motion_core.config import Config, save_config
from motion_core.context import CommandContext
from motion_core.registry import CacheStore, Registry, RegistryClient


def encode(text: str | bytes) -> str:
    data = text.encode("utf-8") if isinstance(text, str) else text
    return base64.b64encode(data).decode("ascii")


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes | None = None) -> None:
        self.status_code = status_code
        if content is None:
            content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.content = content


class FakeSession:
    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[str] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append(url)
        result = self.routes.get(url, FakeResponse(404))
        if isinstance(result, Exception):
            raise result
        return result


class RecordingReporter:
    def __init__(self, answers: list[bool] | None = None) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.prompts: list[str] = []
        self.answers = list(answers or [])

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def blank(self) -> None:
        self.infos.append("")

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.prompts.append(prompt)
        return self.answers.pop(0) if self.answers else default


class RecordingInstaller:
    def __init__(self) -> None:
        self.plans: list[Any] = []

    def __call__(self, plan: Any, cwd: Path) -> None:
        self.plans.append((plan, cwd))


GLASS_PANE_SOURCE = "<script>\n  let { blur = 12 } = $props();\n</script>\n<div class=\"glass\"></div>\n"


def registry_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": "Motion Core",
        "version": "0.4.0",
        "description": "Animated Svelte components",
        "baseDependencies": {"clsx": "^2.1.0"},
        "baseDevDependencies": {"tailwindcss": "^4.0.0"},
        "components": {
            "glass-pane": {
                "name": "Glass Pane",
                "description": "Frosted glass surface",
                "category": "surfaces",
                "files": [
                    {
                        "path": "components/glass-pane/GlassPane.svelte",
                        "kind": "entry",
                        "typeExports": ["GlassPaneProps"],
                    }
                ],
                "dependencies": {"gsap": "^3.12.0"},
            },
            "logo-carousel": {
                "name": "Logo Carousel",
                "category": "marquee",
                "files": [
                    {"path": "components/logo-carousel/LogoCarousel.svelte", "kind": "entry"},
                    {"path": "components/logo-carousel/LogoCarouselItem.svelte", "kind": "entry"},
                    {"path": "helpers/marquee.ts", "target": "helpers"},
                ],
                "internalDependencies": ["glass-pane"],
                "devDependencies": {"@types/three": "^0.160.0"},
            },
        },
    }
    payload.update(overrides)
    return payload


def component_files() -> dict[str, str]:
    return {
        "components/glass-pane/GlassPane.svelte": encode(GLASS_PANE_SOURCE),
        "components/logo-carousel/LogoCarousel.svelte": encode("<div>carousel</div>\n"),
        "components/logo-carousel/LogoCarouselItem.svelte": encode("<div>item</div>\n"),
        "helpers/marquee.ts": encode("export const marquee = () => {};\n"),
        "utils/cn.ts": encode("export function cn() { return \"\"; }\n"),
        "tokens/motion-core.css": encode('@import "tailwindcss";\n\n@utility card-highlight {\n  color: inherit;\n}\n'),
    }


@pytest.fixture
def static_registry() -> RegistryClient:
    client = RegistryClient.from_registry(Registry.from_dict(registry_payload()))
    client.preload_component_manifest(component_files())
    return client


@pytest.fixture
def cache_store(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / "cache")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = (tmp_path / "app").resolve()
    root.mkdir()
    save_config(root / "motion-core.json", Config())
    (root / "package.json").write_text(
        json.dumps({"dependencies": {"svelte": "^5.0.0"}, "devDependencies": {"tailwindcss": "^4.0.0"}}),
        encoding="utf-8",
    )
    return root


@pytest.fixture
def make_context(static_registry: RegistryClient, cache_store: CacheStore):
    def _make(root: Path, registry: RegistryClient | None = None) -> CommandContext:
        return CommandContext.discover(root, registry or static_registry, cache_store)

    return _make
