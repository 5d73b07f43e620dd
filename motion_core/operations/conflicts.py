"""Decide what happens to planned files that would overwrite local edits."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Sequence

from ..reporter import Reporter
from .add import PlannedFile, PlannedFileStatus

DIFF_CONTEXT_LINES = 3
BINARY_NOTE = "binary — diff unavailable"
UNREADABLE_NOTE = "content unreadable"
DRY_RUN_NOTE = "Dry run: would prompt before overwriting this file."


class ConfirmationMode(str, Enum):
    PROMPT = "prompt"
    ASSUME_YES = "assume_yes"
    NON_INTERACTIVE = "non_interactive"


def confirmation_mode(
    *,
    assume_yes_flag: bool = False,
    assume_yes_env: bool = False,
    ci: bool = False,
    stdin_is_tty: bool = False,
) -> ConfirmationMode:
    if assume_yes_flag or assume_yes_env:
        return ConfirmationMode.ASSUME_YES
    if ci:
        return ConfirmationMode.NON_INTERACTIVE
    if stdin_is_tty:
        return ConfirmationMode.PROMPT
    return ConfirmationMode.NON_INTERACTIVE


def auto_approval_message(mode: ConfirmationMode, assume_yes_flag: bool, action: str) -> str | None:
    """Notice printed once when ``action`` proceeds without asking."""
    if mode is ConfirmationMode.ASSUME_YES:
        if assume_yes_flag:
            return f"--yes supplied; {action} automatically."
        return f"MOTION_CORE_CLI_ASSUME_YES set; {action} automatically."
    if mode is ConfirmationMode.NON_INTERACTIVE:
        return f"Non-interactive shell detected; {action} automatically."
    return None


def render_file_diff(planned: PlannedFile, *, label: str | None = None) -> list[str]:
    """Unified diff lines between the file on disk and the registry version."""
    if planned.existing_contents is None:
        return [UNREADABLE_NOTE]
    try:
        before = planned.existing_contents.decode("utf-8")
        after = planned.contents.decode("utf-8")
    except UnicodeDecodeError:
        return [BINARY_NOTE]
    name = label or str(planned.destination)
    return [
        line.rstrip("\r\n")
        for line in difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"{name} (local)",
            tofile=f"{name} (registry)",
            n=DIFF_CONTEXT_LINES,
        )
    ]


@dataclass(frozen=True)
class ConflictSummary:
    conflicts: int
    declined: tuple[Path, ...] = ()


def resolve_file_conflicts(
    reporter: Reporter,
    planned_files: Sequence[PlannedFile],
    *,
    mode: ConfirmationMode,
    dry_run: bool = False,
    assume_yes_flag: bool = False,
) -> ConflictSummary:
    """Show each pending overwrite and record whether it may proceed.

    Only ``UPDATE`` entries are touched. Declining a prompt clears the
    file's ``apply`` flag so the apply step reports it as skipped.
    """
    conflicts = [item for item in planned_files if item.status is PlannedFileStatus.UPDATE]
    if not conflicts:
        return ConflictSummary(conflicts=0)

    reporter.blank()
    reporter.info("Existing file changes detected")
    declined: list[Path] = []
    auto_message_printed = False

    for item in conflicts:
        reporter.info(str(item.destination))
        reporter.info(f"Component: {item.component_name} ({item.registry_path})")
        reporter.blank()
        for line in render_file_diff(item):
            reporter.info(line)
        reporter.blank()

        if dry_run:
            reporter.info(DRY_RUN_NOTE)
            continue

        if mode is ConfirmationMode.PROMPT:
            item.apply = reporter.confirm("Overwrite existing file?", default=False)
            if not item.apply:
                declined.append(item.destination)
                reporter.warn(f"Skipping updates for {item.destination}")
        elif not auto_message_printed:
            message = auto_approval_message(mode, assume_yes_flag, "overwriting conflicts")
            if message:
                reporter.info(message)
            auto_message_printed = True

    return ConflictSummary(conflicts=len(conflicts), declined=tuple(declined))
