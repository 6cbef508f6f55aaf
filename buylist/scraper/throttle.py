"""
Card Buylist — Request Throttle

Fixed inter-request delay for sheet fetches plus browser user-agent
selection. Google rate-limits published-sheet endpoints informally, so every
sheet request (HTML GET or browser navigation) is followed by a wait.
"""

from __future__ import annotations

import asyncio
import random

import structlog

from buylist.config import settings

logger = structlog.get_logger(__name__)


class RequestThrottle:
    """
    Sequential request pacing.

    Usage:
        throttle = RequestThrottle()
        for gid in gids:
            await fetch(gid)
            await throttle.wait()
    """

    USER_AGENTS = [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:123.0) Gecko/20100101 Firefox/123.0",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.3 Safari/605.1.15",
    ]

    def __init__(self, delay_seconds: float | None = None) -> None:
        self._delay = settings.SHEET_REQUEST_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self._requests: int = 0

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def requests_made(self) -> int:
        return self._requests

    async def wait(self) -> None:
        """Record a request and sleep for the fixed delay."""
        self._requests += 1
        if self._delay <= 0:
            return
        logger.debug("throttle_delay", delay_seconds=self._delay, source="throttle")
        await asyncio.sleep(self._delay)

    def get_random_user_agent(self) -> str:
        return random.choice(self.USER_AGENTS)
