from __future__ import annotations

import sys
from typing import Callable, TextIO

INFO_MARK = "›"
WARN_MARK = "!"
ERROR_MARK = "✖"


class ConsoleReporter:
    """Prints operation output and asks yes/no questions on the terminal."""

    def __init__(
        self,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._input = input_fn

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def info(self, message: str) -> None:
        print(f"{INFO_MARK} {message}", file=self.stdout)

    def warn(self, message: str) -> None:
        print(f"{WARN_MARK} {message}", file=self.stdout)

    def error(self, message: str) -> None:
        print(f"{ERROR_MARK} {message}", file=self.stderr)

    def blank(self) -> None:
        print(file=self.stdout)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        suffix = "[Y/n]" if default else "[y/N]"
        try:
            answer = self._input(f"{prompt} {suffix} ").strip().lower()
        except EOFError:
            return default
        if not answer:
            return default
        return answer in ("y", "yes")
