"""Tests for browsing identity randomization."""

import random
from collections import Counter

import pytest

from price_sniper.ingest.base import DeviceClass
from price_sniper.ingest.fingerprint_randomizer import FingerprintRandomizer, pick_identity
from price_sniper.ingest.user_agent_pool import (
    DESKTOP_USER_AGENTS,
    MOBILE_USER_AGENTS,
    UserAgentPool,
)


def test_device_class_split_is_even():
    randomizer = FingerprintRandomizer(rng=random.Random(1234))

    counts = Counter(randomizer.pick_identity().device_class for _ in range(10_000))

    for device_class in DeviceClass:
        assert 0.45 <= counts[device_class] / 10_000 <= 0.55


def test_user_agent_matches_device_class():
    randomizer = FingerprintRandomizer(rng=random.Random(7))

    for _ in range(500):
        identity = randomizer.pick_identity()
        if identity.device_class is DeviceClass.MOBILE:
            assert identity.user_agent in MOBILE_USER_AGENTS
            assert identity.viewport.width < 500
        else:
            assert identity.user_agent in DESKTOP_USER_AGENTS
            assert identity.viewport.width >= 1280


def test_every_pool_entry_gets_used():
    randomizer = FingerprintRandomizer(rng=random.Random(99))

    seen = {randomizer.pick_identity().user_agent for _ in range(2_000)}

    assert seen == set(MOBILE_USER_AGENTS) | set(DESKTOP_USER_AGENTS)


def test_pools_have_at_least_five_agents():
    pool = UserAgentPool()
    assert pool.pool_size(DeviceClass.MOBILE) >= 5
    assert pool.pool_size(DeviceClass.DESKTOP) >= 5


def test_empty_pool_is_rejected():
    with pytest.raises(ValueError):
        UserAgentPool(pools={DeviceClass.MOBILE: MOBILE_USER_AGENTS, DeviceClass.DESKTOP: ()})


def test_context_options():
    identity = pick_identity()
    options = identity.to_context_options()

    assert options["user_agent"] == identity.user_agent
    assert options["viewport"] == {"width": identity.viewport.width, "height": identity.viewport.height}
    assert options["locale"] == identity.locale
    assert options["timezone_id"] == identity.timezone_id
    assert options["is_mobile"] is (identity.device_class is DeviceClass.MOBILE)
    assert options["has_touch"] is options["is_mobile"]
