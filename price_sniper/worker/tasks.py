"""Batch run over every tracking target."""

import logging
import time
from typing import Optional, Sequence

from playwright.async_api import Browser, Error as PlaywrightError
from sqlalchemy.ext.asyncio import async_sessionmaker

from price_sniper import metrics
from price_sniper.config import Settings
from price_sniper.ingest.base import (
    BatchSummary,
    CheckOutcome,
    CheckStage,
    NavigationError,
    SniperError,
    TrackedTarget,
)
from price_sniper.ingest.extractor import ListingExtractor
from price_sniper.ingest.fingerprint_randomizer import FingerprintRandomizer, fingerprint_randomizer
from price_sniper.ingest.navigator import Navigator
from price_sniper.ingest.rate_limiter import RequestPacer
from price_sniper.ingest.reconciler import Reconciler
from price_sniper.ingest.registry import load_target, load_tracking_targets
from price_sniper.ingest.retailers.amazon import AmazonProfile, build_extractor
from price_sniper.ingest.stealth_browser import StealthBrowser
from price_sniper.logging_config import get_logger

logger = logging.getLogger(__name__)


class SniperRunner:
    """
    Checks tracking targets one at a time.

    Each target goes through:
    pending -> identity-assigned -> navigated -> delayed -> extracted -> reconciled | failed

    - One browser for the whole run, a fresh context per target
    - A failing target never stops the batch
    - Fixed spacing between targets caps the request rate
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        navigator: Navigator,
        extractor: ListingExtractor,
        reconciler: Reconciler,
        pacer: RequestPacer,
        browser: StealthBrowser,
        randomizer: Optional[FingerprintRandomizer] = None,
    ):
        self.session_factory = session_factory
        self.navigator = navigator
        self.extractor = extractor
        self.reconciler = reconciler
        self.pacer = pacer
        self.browser = browser
        self.randomizer = randomizer or fingerprint_randomizer

    @classmethod
    def from_settings(cls, settings: Settings, session_factory: async_sessionmaker) -> "SniperRunner":
        """Wire a runner from settings."""
        profile = AmazonProfile.build(settings)
        return cls(
            session_factory=session_factory,
            navigator=Navigator(profile, settings),
            extractor=build_extractor(profile, settings),
            reconciler=Reconciler(session_factory),
            pacer=RequestPacer.from_settings(settings),
            browser=StealthBrowser.from_settings(settings),
        )

    async def run(self, target_id: Optional[int] = None) -> BatchSummary:
        """
        Run one pass over all tracking targets (or a single one).

        Args:
            target_id: Only check this target

        Returns:
            BatchSummary of the pass

        Raises:
            RegistryUnavailableError: If targets cannot be loaded
        """
        if target_id is not None:
            target = await load_target(self.session_factory, target_id)
            targets = (target,) if target else ()
        else:
            targets = await load_tracking_targets(self.session_factory)

        metrics.targets_loaded.set(len(targets))

        if not targets:
            logger.info("No targets to check")
            return BatchSummary()

        logger.info(f"Found {len(targets)} targets to check")

        async with self.browser.launch() as browser:
            summary = await self.check_targets(browser, targets)

        logger.info(
            f"All targets checked: {summary.succeeded} succeeded, {summary.failed} failed"
        )
        return summary

    async def check_targets(self, browser: Browser, targets: Sequence[TrackedTarget]) -> BatchSummary:
        """Check targets in order, spacing them apart."""
        summary = BatchSummary()

        for index, target in enumerate(targets):
            started = time.monotonic()
            outcome = await self.check_target(browser, target)
            metrics.record_check(outcome.succeeded, time.monotonic() - started, outcome.failure_reason)
            summary.outcomes.append(outcome)

            if outcome.succeeded:
                logger.info(
                    f"Success: {target.display_name} at {outcome.price} "
                    f"({outcome.availability.value})"
                )
            else:
                logger.warning(f"Failed: {target.display_name}: {outcome.failure_reason}")

            if index < len(targets) - 1:
                await self.pacer.wait_between_targets()

        return summary

    async def check_target(self, browser: Browser, target: TrackedTarget) -> CheckOutcome:
        """
        Check one target. Never raises; every failure becomes an outcome.

        Args:
            browser: Shared browser
            target: Target to check

        Returns:
            CheckOutcome for the target
        """
        log = get_logger(__name__, target_id=target.id, target=target.display_name)
        stage = CheckStage.PENDING

        def advance(next_stage: CheckStage) -> CheckStage:
            log.debug(f"{target.display_name}: {stage.value} -> {next_stage.value}")
            return next_stage

        log.info(f"Checking: {target.display_name} ({target.locator})")

        try:
            identity = self.randomizer.pick_identity()
            stage = advance(CheckStage.IDENTITY_ASSIGNED)
            log.info(f"User-Agent ({identity.device_class.value}): {identity.user_agent}")

            async with self.browser.session(browser, identity) as page:
                navigation = await self.navigator.navigate_to_target(page, target)
                stage = advance(CheckStage.NAVIGATED)
                log.debug(f"Navigation ended in {navigation.state.value}: {navigation.url}")

                await self.pacer.simulate_reading_delay()
                stage = advance(CheckStage.DELAYED)

                result = await self.extractor.extract_listing(page)
                stage = advance(CheckStage.EXTRACTED)

            outcome = await self.reconciler.reconcile(target, result)
            advance(outcome.stage)
            return outcome

        except NavigationError as e:
            log.warning(f"Navigation failed for {target.display_name}: {e}")
            return CheckOutcome.failure(target, f"navigation {e.kind}: {e.reason}", failed_after=stage)
        except (SniperError, PlaywrightError) as e:
            log.error(f"Check failed for {target.display_name}: {type(e).__name__}: {e}")
            return CheckOutcome.failure(target, f"{type(e).__name__}: {e}", failed_after=stage)
        except Exception as e:
            log.exception(f"Unexpected error checking {target.display_name}")
            return CheckOutcome.failure(target, f"unexpected error: {type(e).__name__}: {e}", failed_after=stage)
