"""Reconnection policy for unexpected closures."""

import asyncio
from typing import Awaitable, Callable

from ..config import DEFAULT_RECONNECT_ATTEMPTS, DEFAULT_RECONNECT_DELAY
from ..errors import ConnectionFailedError
from ..logging_config import get_logger

logger = get_logger(__name__)


Sleep = Callable[[float], Awaitable[None]]


class ReconnectionSupervisor:
    """Retries a connect routine with linear back-off.

    The delay before attempt ``n`` (1-indexed) is ``base_delay * (n - 1)``:
    the first retry is immediate. The counter is reset by the session on
    every successful open.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_RECONNECT_ATTEMPTS,
        base_delay: float = DEFAULT_RECONNECT_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._sleep = sleep
        self._attempts = 0

    @property
    def attempts(self) -> int:
        """Retries made since the last successful open."""
        return self._attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def can_retry(self) -> bool:
        return self._attempts < self._max_attempts

    def reset(self) -> None:
        """Reset the counter after a successful open."""
        self._attempts = 0

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the given 1-indexed attempt."""
        return self._base_delay * (attempt - 1)

    async def run(self, reconnect: Callable[[], Awaitable[None]]) -> bool:
        """Call ``reconnect`` until it succeeds or the ceiling is reached.

        Returns True on success. ``ConnectionFailedError`` consumes one
        attempt; any other exception propagates.
        """
        while self.can_retry:
            attempt = self._attempts + 1
            delay = self.delay_for(attempt)
            logger.info(
                "Reconnect attempt %s/%s in %.2fs",
                attempt,
                self._max_attempts,
                delay,
            )
            await self._sleep(delay)
            self._attempts = attempt

            try:
                await reconnect()
                return True
            except ConnectionFailedError as e:
                logger.warning("Reconnect attempt %s failed: %s", attempt, e)

        return False
