"""Path helpers that keep registry-provided paths inside the workspace."""

from __future__ import annotations

import re
from pathlib import Path

_SEPARATOR_RE = re.compile(r"[\\/]+")
_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def sanitize_relative_path(path: str) -> Path:
    """Keep only normal named segments of ``path``.

    Parent and current directory references, root markers and drive prefixes
    are dropped, so ``"../../etc/passwd"`` becomes ``etc/passwd``.
    """
    segments: list[str] = []
    for index, part in enumerate(_SEPARATOR_RE.split(path)):
        if index == 0:
            part = _DRIVE_RE.sub("", part)
        if not part or part in (".", ".."):
            continue
        segments.append(part)
    return Path(*segments) if segments else Path()


def workspace_path(workspace_root: Path, configured: str) -> Path:
    relative = sanitize_relative_path(configured)
    if not relative.parts:
        return workspace_root
    return workspace_root / relative


def relative_display(root: Path, target: Path) -> str:
    try:
        return str(target.relative_to(root))
    except ValueError:
        return str(target)
