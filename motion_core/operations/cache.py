from __future__ import annotations

import logging
from dataclasses import dataclass

from ..context import CommandContext
from ..errors import CacheConfirmationRequired
from ..registry import CacheInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheResult:
    info: CacheInfo
    cleared: bool = False


def run(ctx: CommandContext, *, clear: bool = False, force: bool = False) -> CacheResult:
    info = ctx.cache_store.info()
    if not clear:
        return CacheResult(info=info)
    if not force:
        raise CacheConfirmationRequired()
    logger.info("clearing registry cache at %s", info.path)
    ctx.cache_store.clear()
    return CacheResult(info=info, cleared=True)
