from __future__ import annotations

from dataclasses import dataclass

from ..context import CommandContext
from ..registry import RegistryComponent, RegistrySummary


@dataclass(frozen=True)
class ListResult:
    summary: RegistrySummary
    components: list[RegistryComponent]


def run(ctx: CommandContext) -> ListResult:
    return ListResult(summary=ctx.registry.summary(), components=ctx.registry.list_components())
