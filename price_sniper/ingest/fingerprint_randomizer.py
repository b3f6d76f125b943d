"""Browsing identity randomization.

Every target visit gets a fresh identity: device class, user agent,
viewport, locale and timezone are drawn independently so consecutive
requests do not share a fixed fingerprint.
"""

import logging
import random
from typing import Optional

from price_sniper import metrics
from price_sniper.ingest.base import BrowsingIdentity, DeviceClass, Viewport
from price_sniper.ingest.user_agent_pool import UserAgentPool

logger = logging.getLogger(__name__)


class FingerprintRandomizer:
    """
    Picks a randomized browsing identity per page visit.

    Features:
    - 50/50 mobile/desktop split
    - User agent from the device class's pool
    - Viewport matching the device class
    - Locale and timezone variation
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """Initialize fingerprint randomizer.

        Args:
            rng: Random source; pass a seeded one for reproducible picks
        """
        self._rng = rng or random.Random()
        self.user_agents = UserAgentPool(rng=self._rng)

        # Common viewports per device class
        self.viewports = {
            DeviceClass.MOBILE: [
                Viewport(390, 844),
                Viewport(393, 852),
                Viewport(414, 896),
                Viewport(428, 926),
                Viewport(375, 812),
            ],
            DeviceClass.DESKTOP: [
                Viewport(1920, 1080),
                Viewport(1366, 768),
                Viewport(1536, 864),
                Viewport(1440, 900),
                Viewport(1600, 900),
            ],
        }

        self.locales = [
            "en-US",
            "en-IN",
            "en-GB",
        ]

        self.timezones = [
            "America/New_York",
            "Asia/Kolkata",
            "Europe/London",
        ]

    def pick_identity(self) -> BrowsingIdentity:
        """
        Pick a new random identity. Each call is independent of the last.

        Returns:
            BrowsingIdentity for one page visit
        """
        device_class = self._rng.choice([DeviceClass.MOBILE, DeviceClass.DESKTOP])
        identity = BrowsingIdentity(
            device_class=device_class,
            user_agent=self.user_agents.get_for_device(device_class),
            viewport=self._rng.choice(self.viewports[device_class]),
            locale=self._rng.choice(self.locales),
            timezone_id=self._rng.choice(self.timezones),
        )
        metrics.record_identity(device_class.value)
        return identity


# Global fingerprint randomizer instance
fingerprint_randomizer = FingerprintRandomizer()


def pick_identity() -> BrowsingIdentity:
    """Pick a browsing identity from the global randomizer."""
    return fingerprint_randomizer.pick_identity()
