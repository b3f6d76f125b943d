"""Navigation to a target's product page.

A target is reached either directly by URL, or by loading the site search
for its identifier and drilling into the first result. The drill-down is a
second, optional stage: when it fails the search page stays loaded and the
extractor works with whatever is on it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlencode, urlparse

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from price_sniper.config import Settings
from price_sniper.ingest.base import NavigationError, TrackedTarget
from price_sniper.ingest.retailers.amazon import SiteProfile

logger = logging.getLogger(__name__)


class LocatorKind(str, Enum):
    URL = "url"
    IDENTIFIER = "identifier"


class NavigationState(str, Enum):
    DIRECT_LOADED = "direct-loaded"
    SEARCH_LOADED = "search-loaded"
    DETAIL_LOADED = "detail-loaded"


@dataclass(frozen=True)
class NavigationResult:
    state: NavigationState
    url: str


def _host_matches_site(host: str, domain: str) -> bool:
    # Any regional storefront of the site counts (amazon.in, www.amazon.com, ...)
    site_name = domain.split(".")[0].lower()
    return site_name in host.lower().split(".")


def classify_locator(locator: str, domain: str) -> LocatorKind:
    """
    Decide how a locator is reached.

    Args:
        locator: URL or search token from the registry
        domain: Configured site domain

    Returns:
        LocatorKind.URL for a site URL, LocatorKind.IDENTIFIER otherwise

    Raises:
        NavigationError: If the locator is empty or a URL for another site
    """
    locator = (locator or "").strip()
    if not locator:
        raise NavigationError("locator", "", "no URL or identifier provided")

    parsed = urlparse(locator)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        if _host_matches_site(parsed.hostname or "", domain):
            return LocatorKind.URL
        raise NavigationError("locator", locator, f"URL is not on {domain}")
    if parsed.scheme in ("http", "https"):
        raise NavigationError("locator", locator, "malformed URL")

    return LocatorKind.IDENTIFIER


class Navigator:
    """Drives a page to a target, applying load and timeout policy."""

    def __init__(self, profile: SiteProfile, settings: Settings):
        self.profile = profile
        self.navigation_timeout_ms = settings.navigation_timeout_ms
        self.result_wait_timeout_ms = settings.result_wait_timeout_ms
        self.drilldown_timeout_ms = settings.drilldown_timeout_ms

    def build_search_url(self, identifier: str) -> str:
        return f"{self.profile.search_base}?{urlencode({'k': identifier})}"

    async def navigate_to_target(self, page: Page, target: TrackedTarget) -> NavigationResult:
        """
        Load the target's page.

        Args:
            page: Fresh page in the target's browser context
            target: Target to reach

        Returns:
            NavigationResult with the state the page ended in

        Raises:
            NavigationError: If the direct or search page fails to load
        """
        kind = classify_locator(target.locator, self.profile.domain)

        if kind is LocatorKind.URL:
            await self._load(page, target.locator)
            return NavigationResult(NavigationState.DIRECT_LOADED, target.locator)

        search_url = self.build_search_url(target.locator)
        await self._load(page, search_url)
        return await self._drill_down(page, search_url)

    async def _load(self, page: Page, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationError("timeout", url, f"no network idle within {self.navigation_timeout_ms}ms") from e
        except PlaywrightError as e:
            raise NavigationError("network", url, str(e)) from e

    async def _drill_down(self, page: Page, search_url: str) -> NavigationResult:
        """search-loaded -> detail-loaded, or search-loaded unchanged."""
        unchanged = NavigationResult(NavigationState.SEARCH_LOADED, search_url)
        selector = self.profile.search_result_selector

        try:
            first_result = await page.wait_for_selector(selector, timeout=self.result_wait_timeout_ms)
        except PlaywrightError as e:
            logger.info(f"No search result for {search_url}, using search page: {e}")
            return unchanged

        if first_result is None:
            logger.info(f"No search result for {search_url}, using search page")
            return unchanged

        try:
            async with page.expect_navigation(
                wait_until="networkidle", timeout=self.drilldown_timeout_ms
            ):
                await first_result.click()
        except PlaywrightError as e:
            logger.info(f"Could not open first result, using search page: {e}")
            return unchanged

        return NavigationResult(NavigationState.DETAIL_LOADED, page.url)
