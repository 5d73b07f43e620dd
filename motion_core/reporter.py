"""Output seam between the operations and whatever presents them."""

from __future__ import annotations

from typing import Protocol


class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def blank(self) -> None: ...

    def confirm(self, prompt: str, default: bool = False) -> bool: ...
