from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import RecordingInstaller
from motion_core.config import load_config
from motion_core.dependencies import DependencyActionKind
from motion_core.errors import RegistryNetworkError, UnsupportedSvelteError
from motion_core.operations import init as core_init
from motion_core.operations.init import ConfigStateKind, locate_tailwind_css
from motion_core.project import FrameworkKind
from motion_core.workspace import TailwindSyncState


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = (tmp_path / "site").resolve()
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text(
        json.dumps(
            {
                "dependencies": {"svelte": "^5.2.0"},
                "devDependencies": {"@sveltejs/kit": "^2.5.0", "tailwindcss": "^4.0.0"},
            }
        ),
        encoding="utf-8",
    )
    (root / "package-lock.json").write_text("{}", encoding="utf-8")
    (root / "src" / "app.css").write_text('@import "tailwindcss";\n', encoding="utf-8")
    return root


def test_init_prepares_workspace(site: Path, make_context) -> None:
    installer = RecordingInstaller()

    result = core_init.run(make_context(site), installer=installer)

    assert result.framework.framework is FrameworkKind.SVELTEKIT
    assert result.config_state.kind is ConfigStateKind.CREATED
    assert load_config(site / "motion-core.json").tailwind.css == "src/app.css"
    assert (site / "src/lib/motion-core/utils/cn.ts").exists()
    assert result.tokens_status.state is TailwindSyncState.UPDATED
    assert "@utility card-highlight" in (site / "src/app.css").read_text(encoding="utf-8")
    assert result.dependencies.runtime.kind is DependencyActionKind.INSTALLED
    assert result.dependencies.runtime.packages == ("clsx@^2.1.0",)
    assert result.dependencies.dev.kind is DependencyActionKind.ALREADY_INSTALLED
    assert [plan.packages for plan, _ in installer.plans] == [("clsx@^2.1.0",)]
    assert result.warnings == []
    assert result.has_changes


def test_init_is_idempotent(site: Path, make_context) -> None:
    core_init.run(make_context(site), installer=RecordingInstaller())
    package = json.loads((site / "package.json").read_text(encoding="utf-8"))
    package["dependencies"]["clsx"] = "^2.1.0"
    (site / "package.json").write_text(json.dumps(package), encoding="utf-8")

    result = core_init.run(make_context(site), installer=RecordingInstaller())

    assert result.config_state.kind is ConfigStateKind.ALREADY_EXISTS
    assert not result.scaffold.any()
    assert result.tokens_status.state is TailwindSyncState.ALREADY_PRESENT
    assert result.dependencies.runtime.kind is DependencyActionKind.ALREADY_INSTALLED
    assert not result.has_changes


def test_init_dry_run_writes_nothing(site: Path, make_context) -> None:
    installer = RecordingInstaller()

    result = core_init.run(make_context(site), dry_run=True, installer=installer)

    assert result.config_state.kind is ConfigStateKind.WOULD_CREATE
    assert not (site / "motion-core.json").exists()
    assert not (site / "src/lib").exists()
    assert result.tokens_status.state is TailwindSyncState.DRY_RUN
    assert (site / "src/app.css").read_text(encoding="utf-8") == '@import "tailwindcss";\n'
    assert result.dependencies.runtime.kind is DependencyActionKind.DRY_RUN
    assert installer.plans == []
    assert not result.has_changes


def test_init_rejects_svelte_four(site: Path, make_context) -> None:
    (site / "package.json").write_text(json.dumps({"dependencies": {"svelte": "^4.2.0"}}), encoding="utf-8")

    with pytest.raises(UnsupportedSvelteError) as excinfo:
        core_init.run(make_context(site), installer=RecordingInstaller())
    assert excinfo.value.found == "^4.2.0"
    assert not (site / "motion-core.json").exists()


def test_init_warns_about_old_tailwind(site: Path, make_context) -> None:
    (site / "package.json").write_text(
        json.dumps({"dependencies": {"svelte": "^5.0.0", "clsx": "^2.1.0"}, "devDependencies": {"tailwindcss": "^3.4.0"}}),
        encoding="utf-8",
    )

    result = core_init.run(make_context(site), installer=RecordingInstaller())

    assert result.warnings == [
        "Tailwind CSS v4 not detected (found ^3.4.0) - Install or upgrade Tailwind before using Motion Core components."
    ]


def test_init_survives_missing_registry_metadata(site: Path, make_context, static_registry, monkeypatch) -> None:
    def unavailable():
        raise RegistryNetworkError("offline")

    monkeypatch.setattr(static_registry, "base_dependencies", unavailable)
    installer = RecordingInstaller()

    result = core_init.run(make_context(site), installer=installer)

    assert result.dependencies.runtime.kind is DependencyActionKind.SKIPPED
    assert result.dependencies.dev.kind is DependencyActionKind.SKIPPED
    assert result.warnings == ["Registry metadata unavailable: network error: offline"]
    assert installer.plans == []


def test_locate_tailwind_css_prefers_shallow_files(tmp_path: Path) -> None:
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "tw.css").write_text('@import "tailwindcss";', encoding="utf-8")
    (tmp_path / "src" / "lib" / "styles").mkdir(parents=True)
    (tmp_path / "src" / "lib" / "styles" / "theme.css").write_text("@tailwind base;", encoding="utf-8")
    (tmp_path / "src" / "routes").mkdir()
    (tmp_path / "src" / "routes" / "page.css").write_text("body {}", encoding="utf-8")

    assert locate_tailwind_css(tmp_path) == "src/lib/styles/theme.css"

    (tmp_path / "src" / "app.css").write_text('@import "tailwindcss";', encoding="utf-8")
    assert locate_tailwind_css(tmp_path) == "src/app.css"


def test_locate_tailwind_css_none(tmp_path: Path) -> None:
    assert locate_tailwind_css(tmp_path) is None
