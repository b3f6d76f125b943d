"""User agent pools keyed by device class.

Mobile identities present as an iPhone running Safari, desktop identities
as a Windows laptop running Chrome, Firefox or Edge.
"""

import logging
import random
from typing import Dict, Optional, Tuple

from price_sniper.ingest.base import DeviceClass

logger = logging.getLogger(__name__)


MOBILE_USER_AGENTS: Tuple[str, ...] = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 20_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/20.0 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 19_1 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/19.1 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 19_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/19.0 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 18_2 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.2 Mobile/15E148 Safari/604.1",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 18_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.0 Mobile/15E148 Safari/604.1",
)

DESKTOP_USER_AGENTS: Tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 11.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0",
)


class UserAgentPool:
    """Fixed user agent pools, one per device class.

    Selection is uniform and memoryless: repeats across visits are
    expected.
    """

    def __init__(
        self,
        pools: Optional[Dict[DeviceClass, Tuple[str, ...]]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._pools = pools or {
            DeviceClass.MOBILE: MOBILE_USER_AGENTS,
            DeviceClass.DESKTOP: DESKTOP_USER_AGENTS,
        }
        self._rng = rng or random.Random()

        for device_class in DeviceClass:
            if not self._pools.get(device_class):
                raise ValueError(f"User agent pool for {device_class.value} is empty")

    def get_for_device(self, device_class: DeviceClass) -> str:
        """
        Get a random user agent for a device class.

        Args:
            device_class: Mobile or desktop

        Returns:
            User agent string
        """
        return self._rng.choice(self._pools[device_class])

    def pool_size(self, device_class: DeviceClass) -> int:
        return len(self._pools[device_class])


# Global user agent pool instance
user_agent_pool = UserAgentPool()
