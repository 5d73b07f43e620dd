"""Prepare the current workspace for Motion Core components."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

from motion_core.dependencies import DependencyAction, DependencyActionKind
from motion_core.errors import HelperDownloadError, PackageJsonError, UnsupportedSvelteError
from motion_core.operations import init as core_init
from motion_core.operations.init import ConfigStateKind, InitResult
from motion_core.pkg_manager import PackageManagerKind
from motion_core.workspace import TailwindSyncState, TailwindSyncStatus

from . import MotionCommand, motioncommand


@motioncommand(name="init", help="Initialize current workspace for Motion Core components")
class InitCommand(MotionCommand):
    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--dry-run", action="store_true", help="Preview actions without writing files")

    def run(self, argv: Namespace) -> int:
        reporter = self.reporter
        dry_run = bool(getattr(argv, "dry_run", False))
        reporter.info("Motion Core workspace setup")
        if dry_run:
            reporter.info("Dry run enabled - no files or dependencies will be modified.")

        try:
            result = core_init.run(self.runtime.context(), dry_run=dry_run, installer=self.runtime.installer)
        except PackageJsonError as exc:
            reporter.error(f"failed to read package.json (required for detection): {exc}")
            return 0
        except UnsupportedSvelteError as exc:
            version = exc.found or "unknown version"
            reporter.error(f"Svelte >=5 is required. Found {version}. Please upgrade and rerun `motion-core init`.")
            return 0
        except HelperDownloadError as exc:
            reporter.error(f"Unable to download Motion Core helper `utils/cn.ts`: {exc}")
            reporter.info("Connect to the internet and rerun `motion-core init` once you're online.")
            return 1

        for warning in result.warnings:
            reporter.warn(warning)
        self._report_tokens(result.tokens_status)
        self._print_summary(result)
        return 0

    def _report_tokens(self, status: TailwindSyncStatus) -> None:
        if status.state is TailwindSyncState.MISSING_CONFIG:
            self.reporter.warn("tailwind.css path missing from motion-core.json; skipping token sync")
        elif status.state is TailwindSyncState.MISSING_FILE:
            self.reporter.warn(f"Tailwind CSS file {status.target} not found; skipping token sync")
        elif status.state is TailwindSyncState.ALREADY_PRESENT:
            self.reporter.info(f"Motion Core tokens already present in {status.target}")
        elif status.state is TailwindSyncState.DRY_RUN:
            self.reporter.info(f"Would inject Motion Core tokens into {status.target}")
        else:
            self.reporter.info(f"Motion Core tokens synced at {status.target}")

    def _print_summary(self, result: InitResult) -> None:
        reporter = self.reporter
        reporter.blank()
        reporter.info("Dry run summary" if result.dry_run else "Workspace ready")
        reporter.info(f"{result.framework.framework.label} • package manager: {result.package_manager.label}")

        state = result.config_state
        if state.kind is ConfigStateKind.ALREADY_EXISTS:
            reporter.info(f"Using existing configuration at {state.path}")
        elif state.kind is ConfigStateKind.CREATED:
            reporter.info(f"Created configuration at {state.path}")
        else:
            reporter.info(f"Would create configuration at {state.path}")

        if result.scaffold.any():
            reporter.blank()
            reporter.info("Planned workspace files" if result.dry_run else "Workspace files")
            if result.scaffold.directories:
                reporter.info("Directories")
                for directory in result.scaffold.directories:
                    reporter.info(f"  {directory}")
            if result.scaffold.files:
                reporter.info("Files")
                for path in result.scaffold.files:
                    reporter.info(f"  {path}")

        reporter.blank()
        reporter.info("Dependencies")
        self._report_scope("Runtime", result.dependencies.runtime, result.package_manager)
        self._report_scope("Dev", result.dependencies.dev, result.package_manager)
        reporter.blank()
        reporter.info("Next: run `motion-core add glass-pane` to pull your first component.")
        if not result.has_changes:
            reporter.info(f"{self.prefix()} no changes")

    def _report_scope(self, label: str, action: DependencyAction, manager: PackageManagerKind) -> None:
        packages = ", ".join(action.packages)
        if action.kind is DependencyActionKind.ALREADY_INSTALLED:
            self.reporter.info(f"{label} dependencies already installed")
        elif action.kind is DependencyActionKind.INSTALLED:
            self.reporter.info(f"{label} dependencies installed via {manager.label}: {packages}")
        elif action.kind is DependencyActionKind.DRY_RUN:
            self.reporter.info(f"Would install {label} dependencies via {manager.label}: {packages}")
        elif action.kind is DependencyActionKind.MANUAL:
            self.reporter.warn(f"Install {label} dependencies manually: {packages}")
        else:
            self.reporter.warn(action.reason or f"{label} dependency install skipped")
