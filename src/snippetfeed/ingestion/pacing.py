"""Fixed-delay pacing between consecutive requests from one adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Pacer:
    """Suspend for a fixed delay before every request except the first.

    One Pacer covers one adapter invocation. It does not look at request
    outcomes and never retries; the delay applies after failures too.
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._calls = 0

    @property
    def calls(self) -> int:
        return self._calls

    async def wait(self) -> None:
        if self._calls > 0 and self._delay_seconds > 0:
            logger.debug("Pacing for %.1fs", self._delay_seconds)
            await self._sleep(self._delay_seconds)
        self._calls += 1
