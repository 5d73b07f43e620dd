"""File replacement with a temporary backup."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .errors import WorkspaceIOError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".motion-core.bak"


def backup_path(target: Path) -> Path:
    return target.with_name(target.name + BACKUP_SUFFIX)


def write_new_file(target: Path, data: bytes) -> None:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise WorkspaceIOError(target, str(exc)) from exc


def replace_file(target: Path, data: bytes) -> None:
    """Overwrite ``target``, restoring the previous contents if the write fails.

    The backup lives next to the target for the duration of the write and is
    removed once the new contents are on disk.
    """
    if not target.exists():
        write_new_file(target, data)
        return

    backup = backup_path(target)
    try:
        shutil.copy2(target, backup)
    except OSError as exc:
        raise WorkspaceIOError(backup, str(exc)) from exc

    try:
        target.write_bytes(data)
    except OSError as exc:
        try:
            shutil.copy2(backup, target)
        except OSError as restore_exc:
            # keep the backup around so the user can recover by hand
            logger.error("failed to restore %s from %s: %s", target, backup, restore_exc)
            raise WorkspaceIOError(target, f"{exc}; restore from {backup} failed: {restore_exc}") from exc
        _remove_backup(backup)
        raise WorkspaceIOError(target, str(exc)) from exc
    _remove_backup(backup)


def _remove_backup(backup: Path) -> None:
    try:
        backup.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("failed to remove backup %s: %s", backup, exc)
