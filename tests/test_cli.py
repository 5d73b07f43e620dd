from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest

from conftest import GLASS_PANE_SOURCE, RecordingInstaller, RecordingReporter, registry_payload
from motion_cli import __main__ as cli_entry
from motion_cli.main import main
from motion_core.registry import Registry, RegistryClient
from motion_core.settings import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(cache_dir=tmp_path / "cache")


def test_console_module_entrypoint_delegates_to_cli_main(monkeypatch) -> None:
    cli_main = importlib.import_module("motion_cli.main")
    monkeypatch.setattr(cli_main, "main", lambda: 7)

    assert cli_entry.run() == 7
    assert cli_entry.main() == 7


def test_no_command_prints_help(tmp_path: Path, settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([], start_dir=tmp_path, settings=settings) == 1
    assert "usage: motion-core" in capsys.readouterr().out


def test_list_json(tmp_path: Path, settings: Settings, static_registry, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["list", "--format", "json"], start_dir=tmp_path, settings=settings, registry=static_registry)

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["registry"] == {
        "name": "Motion Core",
        "version": "0.4.0",
        "description": "Animated Svelte components",
        "components": 2,
    }
    assert [entry["slug"] for entry in payload["components"]] == ["glass-pane", "logo-carousel"]


def test_list_text_groups_by_category(tmp_path: Path, settings: Settings) -> None:
    payload = registry_payload()
    payload["components"]["logo-carousel"].pop("category")
    reporter = RecordingReporter()

    code = main(
        ["list"],
        start_dir=tmp_path,
        settings=settings,
        reporter=reporter,
        registry=RegistryClient.from_registry(Registry.from_dict(payload)),
    )

    assert code == 0
    assert "Motion Core v0.4.0 - 2 components" in reporter.infos
    assert reporter.infos.index("Uncategorized") < reporter.infos.index("surfaces")
    assert "    slug: glass-pane" in reporter.infos
    assert "    No description provided yet - focused on motion visuals." in reporter.infos


def test_cache_clear_requires_force(tmp_path: Path, settings: Settings) -> None:
    reporter = RecordingReporter()
    marker = settings.cache_dir / "registry-abc" / "registry.json"
    marker.parent.mkdir(parents=True)
    marker.write_text("{}", encoding="utf-8")

    assert main(["cache", "--clear"], start_dir=tmp_path, settings=settings, reporter=reporter) == 0
    assert reporter.warnings == ["use --force to confirm cache clearing (files will be deleted from disk)"]
    assert marker.exists()

    assert main(["cache", "--clear", "--force"], start_dir=tmp_path, settings=settings, reporter=reporter) == 0
    assert "cache cleared" in reporter.infos
    assert not marker.exists()
    assert settings.cache_dir.is_dir()


def test_cache_info(tmp_path: Path, settings: Settings) -> None:
    reporter = RecordingReporter()

    assert main(["cache"], start_dir=tmp_path, settings=settings, reporter=reporter) == 0
    assert reporter.infos == [
        f"cache directory: {settings.cache_dir}",
        "registry TTL: 600s, asset TTL: 86400s",
    ]


def test_add_without_config_is_not_fatal(tmp_path: Path, settings: Settings, static_registry) -> None:
    reporter = RecordingReporter()
    bare = tmp_path / "bare"
    bare.mkdir()

    code = main(["add", "glass-pane"], start_dir=bare, settings=settings, reporter=reporter, registry=static_registry)

    assert code == 0
    assert reporter.warnings[0].startswith("no motion-core.json found at")
    assert reporter.errors == []


def test_add_installs_component(workspace: Path, settings: Settings, static_registry) -> None:
    (workspace / "package-lock.json").write_text("{}", encoding="utf-8")
    reporter = RecordingReporter()
    installer = RecordingInstaller()

    code = main(
        ["add", "glass-pane", "--yes"],
        start_dir=workspace,
        settings=settings,
        reporter=reporter,
        registry=static_registry,
        installer=installer,
    )

    destination = workspace / "src/lib/motion-core/glass-pane/GlassPane.svelte"
    assert code == 0
    assert destination.read_text(encoding="utf-8") == GLASS_PANE_SOURCE
    assert "--yes supplied; applying plan automatically." in reporter.infos
    assert f"created {destination}" in reporter.infos
    assert "Installed runtime dependencies: gsap@^3.12.0" in reporter.infos
    assert "Components ready" in reporter.infos
    assert "[motion-core:add] no changes" not in reporter.infos


def test_add_lists_dependency_components(workspace: Path, settings: Settings, static_registry) -> None:
    reporter = RecordingReporter()

    code = main(
        ["add", "logo-carousel", "--dry-run"],
        start_dir=workspace,
        settings=settings,
        reporter=reporter,
        registry=static_registry,
        installer=RecordingInstaller(),
        stdin_is_tty=lambda: False,
    )

    assert code == 0
    assert "  Logo Carousel (logo-carousel)" in reporter.infos
    assert "  Glass Pane (glass-pane) [dependency]" in reporter.infos
    assert "Dry run complete" in reporter.infos
    assert "[motion-core:add] no changes" in reporter.infos
    assert not (workspace / "src/lib/motion-core").exists()


def test_add_plan_declined(workspace: Path, settings: Settings, static_registry) -> None:
    (workspace / "package-lock.json").write_text("{}", encoding="utf-8")
    reporter = RecordingReporter(answers=[False])

    code = main(
        ["add", "glass-pane"],
        start_dir=workspace,
        settings=settings,
        reporter=reporter,
        registry=static_registry,
        stdin_is_tty=lambda: True,
    )

    assert code == 0
    assert reporter.prompts == ["Apply this plan?"]
    assert reporter.warnings == ["installation cancelled"]
    assert not (workspace / "src/lib/motion-core").exists()


def test_add_unknown_component(workspace: Path, settings: Settings, static_registry) -> None:
    reporter = RecordingReporter()

    code = main(["add", "nope"], start_dir=workspace, settings=settings, reporter=reporter, registry=static_registry)

    assert code == 0
    assert reporter.warnings == ["component `nope` not found in registry"]
    assert reporter.errors == []


def test_registry_failure_is_reported_with_prefix(workspace: Path, settings: Settings) -> None:
    client = RegistryClient.from_registry(Registry.from_dict(registry_payload()))
    client.preload_component_manifest({})
    reporter = RecordingReporter()

    code = main(["add", "glass-pane", "--yes"], start_dir=workspace, settings=settings, reporter=reporter, registry=client)

    assert code == 1
    assert reporter.errors == [
        "[motion-core:add] error: component asset `components/glass-pane/GlassPane.svelte` not found in manifest"
    ]


def test_init_reports_missing_package_json(tmp_path: Path, settings: Settings, static_registry) -> None:
    reporter = RecordingReporter()

    code = main(["init"], start_dir=tmp_path, settings=settings, reporter=reporter, registry=static_registry)

    assert code == 0
    assert reporter.errors[0].startswith("failed to read package.json (required for detection):")


def test_init_end_to_end(workspace: Path, settings: Settings, static_registry) -> None:
    (workspace / "src").mkdir()
    (workspace / "src" / "app.css").write_text('@import "tailwindcss";\n', encoding="utf-8")
    (workspace / "pnpm-lock.yaml").write_text("", encoding="utf-8")
    reporter = RecordingReporter()

    code = main(
        ["init"],
        start_dir=workspace,
        settings=settings,
        reporter=reporter,
        registry=static_registry,
        installer=RecordingInstaller(),
    )

    assert code == 0
    assert "Workspace ready" in reporter.infos
    assert "unknown framework • package manager: pnpm" in reporter.infos
    assert f"Using existing configuration at {workspace / 'motion-core.json'}" in reporter.infos
    assert "Motion Core tokens synced at src/app.css" in reporter.infos
    assert "Runtime dependencies installed via pnpm: clsx@^2.1.0" in reporter.infos
