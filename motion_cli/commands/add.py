"""Install registry components into the current workspace."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

from motion_core.dependencies import DependencyAction, DependencyActionKind
from motion_core.errors import ComponentNotFoundError, MissingConfigError
from motion_core.operations import add as core_add
from motion_core.operations.conflicts import (
    ConfirmationMode,
    auto_approval_message,
    confirmation_mode,
    resolve_file_conflicts,
)
from motion_core.pkg_manager import PackageManagerKind

from . import MotionCommand, motioncommand

_STATUS_LABELS = {
    core_add.FileStatus.CREATED: ("created", "would create"),
    core_add.FileStatus.UPDATED: ("updated", "would update"),
    core_add.FileStatus.UNCHANGED: ("unchanged", "unchanged"),
    core_add.FileStatus.SKIPPED: ("skipped", "would skip"),
}


@motioncommand(name="add", help="Add one or more components")
class AddCommand(MotionCommand):
    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("components", nargs="+", help="Component slugs to install")
        parser.add_argument(
            "--dry-run", action="store_true", help="Preview actions without modifying files or dependencies"
        )
        parser.add_argument(
            "--yes", "-y", dest="assume_yes", action="store_true", help="Skip confirmation prompts (useful for CI)"
        )

    def run(self, argv: Namespace) -> int:
        reporter = self.reporter
        dry_run = bool(getattr(argv, "dry_run", False))
        assume_yes = bool(getattr(argv, "assume_yes", False))
        settings = self.runtime.settings
        ctx = self.runtime.context()

        reporter.info("Motion Core component install")
        try:
            plan = core_add.plan(ctx, list(argv.components))
        except (MissingConfigError, ComponentNotFoundError) as exc:
            reporter.warn(str(exc))
            return 0

        if not plan.install_order:
            reporter.warn("no components to install")
            return 0

        self._print_plan(plan)
        for name in plan.missing_entry_components:
            reporter.warn(f"component `{name}` does not declare an entry file; skipping export update")
        if plan.package_manager is PackageManagerKind.UNKNOWN:
            reporter.warn("package manager not detected. Missing dependencies will need manual installation.")

        mode = confirmation_mode(
            assume_yes_flag=assume_yes,
            assume_yes_env=settings.assume_yes,
            ci=settings.ci,
            stdin_is_tty=self.runtime.stdin_is_tty(),
        )
        if dry_run:
            reporter.info("Dry run enabled - no files or dependencies will be modified.")
            reporter.blank()
        else:
            reporter.info(f"Installing: {', '.join(plan.install_order)}")
            if mode is ConfirmationMode.PROMPT:
                if not reporter.confirm("Apply this plan?", default=True):
                    reporter.warn("installation cancelled")
                    return 0
            else:
                message = auto_approval_message(mode, assume_yes, "applying plan")
                if message:
                    reporter.info(message)

        resolve_file_conflicts(
            reporter,
            plan.planned_files,
            mode=mode,
            dry_run=dry_run,
            assume_yes_flag=assume_yes,
        )

        outcome = core_add.apply(plan, dry_run=dry_run, installer=self.runtime.installer)
        for report in outcome.files:
            actual, would = _STATUS_LABELS[report.status]
            reporter.info(f"{would if dry_run else actual} {report.destination}")
        if outcome.exports_updated:
            verb = "would update" if dry_run else "updated"
            reporter.info(f"{verb} exports at {plan.barrel_path}")

        self._report_dependencies(plan.package_manager, outcome.runtime, "runtime")
        self._report_dependencies(plan.package_manager, outcome.dev, "dev")

        reporter.blank()
        reporter.info("Dry run complete" if dry_run else "Components ready")
        reporter.info("Import components from your workspace barrel to start animating.")
        if not outcome.changed:
            reporter.info(f"{self.prefix()} no changes")
        return 0

    def _print_plan(self, plan: core_add.AddPlan) -> None:
        self.reporter.blank()
        self.reporter.info("Planned components")
        requested = set(plan.requested_components)
        for slug in plan.install_order:
            component = plan.component_map[slug]
            suffix = "" if slug in requested else " [dependency]"
            self.reporter.info(f"  {component.name} ({slug}){suffix}")

    def _report_dependencies(self, manager: PackageManagerKind, action: DependencyAction, scope: str) -> None:
        packages = ", ".join(action.packages)
        if action.kind is DependencyActionKind.INSTALLED:
            self.reporter.info(f"Installed {scope} dependencies: {packages}")
        elif action.kind is DependencyActionKind.MANUAL:
            self.reporter.warn(f"Package manager not detected. Install {scope} dependencies manually: {packages}")
        elif action.kind is DependencyActionKind.DRY_RUN:
            self.reporter.info(f"Would install {scope} dependencies via {manager.label}: {packages}")
        elif action.kind is DependencyActionKind.SKIPPED:
            self.reporter.warn(action.reason or f"skipped {scope} dependency install")
