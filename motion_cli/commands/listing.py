"""List the components published by the registry."""

from __future__ import annotations

import json
from argparse import ArgumentParser, Namespace
from collections import defaultdict

from motion_core.operations import listing as core_list

from . import MotionCommand, motioncommand

_UNCATEGORIZED = "Uncategorized"
_NO_DESCRIPTION = "No description provided yet - focused on motion visuals."


@motioncommand(name="list", help="List available components from the registry")
class ListCommand(MotionCommand):
    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--format", choices=["text", "json"], default="text")

    def run(self, argv: Namespace) -> int:
        result = core_list.run(self.runtime.context())
        summary = result.summary

        if str(getattr(argv, "format", "text")) == "json":
            payload = {
                "registry": {
                    "name": summary.name,
                    "version": summary.version,
                    "description": summary.description,
                    "components": summary.component_count,
                },
                "components": [
                    {
                        "slug": entry.slug,
                        "name": entry.component.name,
                        "description": entry.component.description,
                        "category": entry.component.category,
                    }
                    for entry in result.components
                ],
            }
            print(json.dumps(payload, indent=2))
            return 0

        reporter = self.reporter
        reporter.info(f"{summary.name} components")
        reporter.info(f"{summary.name} v{summary.version} - {summary.component_count} components")
        if summary.description:
            reporter.info(summary.description)

        groups = defaultdict(list)
        for entry in result.components:
            groups[entry.component.category or _UNCATEGORIZED].append(entry)
        for category in sorted(groups):
            entries = sorted(groups[category], key=lambda item: item.component.name)
            reporter.blank()
            reporter.info(category)
            reporter.info(f"{len(entries)} component{'' if len(entries) == 1 else 's'}")
            for entry in entries:
                reporter.info(f"  {entry.component.name}")
                reporter.info(f"    {entry.component.description or _NO_DESCRIPTION}")
                reporter.info(f"    slug: {entry.slug}")

        reporter.blank()
        reporter.info("Install components")
        reporter.info("  motion-core add glass-pane")
        reporter.info("  motion-core add logo-carousel --dry-run")
        return 0
