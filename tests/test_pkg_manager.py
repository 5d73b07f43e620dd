from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from motion_core import pkg_manager
from motion_core.errors import PackageManagerError
from motion_core.pkg_manager import InstallPlan, PackageManagerKind, detect_package_manager, run_install_plan


@pytest.mark.parametrize(
    "lockfile, expected",
    [
        ("pnpm-lock.yaml", PackageManagerKind.PNPM),
        ("yarn.lock", PackageManagerKind.YARN),
        ("bun.lockb", PackageManagerKind.BUN),
        ("bun.lock", PackageManagerKind.BUN),
        ("package-lock.json", PackageManagerKind.NPM),
    ],
)
def test_detects_manager_from_lockfile(tmp_path: Path, lockfile: str, expected: PackageManagerKind) -> None:
    (tmp_path / lockfile).write_text("", encoding="utf-8")

    assert detect_package_manager(tmp_path) is expected


def test_detection_walks_up_to_monorepo_root(tmp_path: Path) -> None:
    (tmp_path / "pnpm-lock.yaml").write_text("", encoding="utf-8")
    nested = tmp_path / "apps" / "site"
    nested.mkdir(parents=True)

    assert detect_package_manager(nested) is PackageManagerKind.PNPM


def test_pnpm_wins_over_npm_in_same_directory(tmp_path: Path) -> None:
    (tmp_path / "package-lock.json").write_text("{}", encoding="utf-8")
    (tmp_path / "pnpm-lock.yaml").write_text("", encoding="utf-8")

    assert detect_package_manager(tmp_path) is PackageManagerKind.PNPM


@pytest.mark.parametrize(
    "manager, dev, expected",
    [
        (PackageManagerKind.NPM, False, ["install", "gsap"]),
        (PackageManagerKind.NPM, True, ["install", "--save-dev", "gsap"]),
        (PackageManagerKind.PNPM, True, ["add", "-D", "gsap"]),
        (PackageManagerKind.YARN, False, ["add", "gsap"]),
        (PackageManagerKind.BUN, True, ["add", "-d", "gsap"]),
    ],
)
def test_install_commands(manager: PackageManagerKind, dev: bool, expected: list[str]) -> None:
    argv = InstallPlan(manager=manager, packages=("gsap",), dev=dev).command()

    assert argv[1:] == expected


def test_unknown_manager_has_no_command() -> None:
    with pytest.raises(PackageManagerError):
        InstallPlan(manager=PackageManagerKind.UNKNOWN, packages=("gsap",)).command()


def test_run_install_plan_invokes_subprocess(tmp_path: Path, monkeypatch) -> None:
    calls = []

    def fake_run(argv, cwd=None, check=False):
        calls.append((argv, cwd))
        return subprocess.CompletedProcess(argv, 0)

    monkeypatch.setattr(pkg_manager.subprocess, "run", fake_run)

    run_install_plan(InstallPlan(manager=PackageManagerKind.PNPM, packages=("gsap@^3.12.0",)), tmp_path)

    assert calls == [([pkg_manager._executable("pnpm"), "add", "gsap@^3.12.0"], str(tmp_path))]


def test_run_install_plan_reports_failure(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        pkg_manager.subprocess, "run", lambda argv, cwd=None, check=False: subprocess.CompletedProcess(argv, 1)
    )

    with pytest.raises(PackageManagerError, match="exited with status 1"):
        run_install_plan(InstallPlan(manager=PackageManagerKind.NPM, packages=("gsap",)), tmp_path)


def test_run_install_plan_missing_binary(tmp_path: Path, monkeypatch) -> None:
    def missing(argv, cwd=None, check=False):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(pkg_manager.subprocess, "run", missing)

    with pytest.raises(PackageManagerError, match="failed to run"):
        run_install_plan(InstallPlan(manager=PackageManagerKind.YARN, packages=("gsap",)), tmp_path)


def test_empty_plan_is_noop(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(pkg_manager.subprocess, "run", lambda *a, **k: pytest.fail("should not run"))

    run_install_plan(InstallPlan(manager=PackageManagerKind.NPM, packages=()), tmp_path)
