from __future__ import annotations

from argparse import ArgumentParser, Namespace

from motion_core.errors import CacheConfirmationRequired
from motion_core.operations import cache as core_cache

from . import MotionCommand, motioncommand


@motioncommand(name="cache", help="Inspect or clear local cache")
class CacheCommand(MotionCommand):
    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("--clear", action="store_true", help="Clear cached registry data")
        parser.add_argument("--force", action="store_true", help="Confirm cache clearing")

    def run(self, argv: Namespace) -> int:
        try:
            result = core_cache.run(
                self.runtime.context(),
                clear=bool(getattr(argv, "clear", False)),
                force=bool(getattr(argv, "force", False)),
            )
        except CacheConfirmationRequired as exc:
            self.reporter.warn(str(exc))
            return 0

        info = result.info
        self.reporter.info(f"cache directory: {info.path}")
        self.reporter.info(
            f"registry TTL: {int(info.registry_ttl_seconds)}s, asset TTL: {int(info.asset_ttl_seconds)}s"
        )
        if result.cleared:
            self.reporter.info("cache cleared")
        return 0
