"""Human-like pacing: reading delay per page and spacing between targets."""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional

from price_sniper.config import Settings

logger = logging.getLogger(__name__)


class RequestPacer:
    """Timed waits that keep request timing irregular and the request rate capped.

    The reading delay is jittered so page dwell time has no fixed latency;
    the spacing between targets is fixed so the outbound rate has a ceiling
    regardless of how long each target took.
    """

    def __init__(
        self,
        reading_delay_min_ms: int = 2000,
        reading_delay_max_ms: int = 4000,
        target_spacing_seconds: float = 5.0,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        rng: Optional[random.Random] = None,
    ):
        if reading_delay_min_ms > reading_delay_max_ms:
            raise ValueError("reading_delay_min_ms must not exceed reading_delay_max_ms")
        self.reading_delay_min_ms = reading_delay_min_ms
        self.reading_delay_max_ms = reading_delay_max_ms
        self.target_spacing_seconds = target_spacing_seconds
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RequestPacer":
        return cls(
            reading_delay_min_ms=settings.reading_delay_min_ms,
            reading_delay_max_ms=settings.reading_delay_max_ms,
            target_spacing_seconds=settings.target_spacing_seconds,
            **kwargs,
        )

    def sample_reading_delay_ms(self) -> float:
        return self._rng.uniform(self.reading_delay_min_ms, self.reading_delay_max_ms)

    async def simulate_reading_delay(self) -> float:
        """
        Wait as if reading the page.

        Returns:
            The delay waited, in milliseconds
        """
        delay_ms = self.sample_reading_delay_ms()
        logger.info(f"Waiting {delay_ms:.0f}ms (simulating reading)")
        await self._sleep(delay_ms / 1000)
        return delay_ms

    async def wait_between_targets(self) -> None:
        """Wait the fixed spacing before the next target."""
        if self.target_spacing_seconds <= 0:
            return
        logger.debug(f"Spacing {self.target_spacing_seconds}s before next target")
        await self._sleep(self.target_spacing_seconds)
