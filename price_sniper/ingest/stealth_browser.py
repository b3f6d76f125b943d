"""Stealth browser lifecycle for Playwright.

One Chromium process is shared by the whole run. Each target visit gets
its own context built from a fresh browsing identity, with automation
markers hidden, and the context is closed when the visit ends.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from playwright.async_api import Browser, Error as PlaywrightError, Page, async_playwright

from price_sniper.config import Settings
from price_sniper.ingest.base import BrowsingIdentity

logger = logging.getLogger(__name__)


STEALTH_SCRIPTS: List[str] = [
    # Hide webdriver property
    """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });
    """,

    # Override permissions
    """
    const originalQuery = window.navigator.permissions.query;
    window.navigator.permissions.query = (parameters) => (
        parameters.name === 'notifications' ?
            Promise.resolve({ state: Notification.permission }) :
            originalQuery(parameters)
    );
    """,

    # Mock plugins
    """
    Object.defineProperty(navigator, 'plugins', {
        get: () => [1, 2, 3, 4, 5]
    });
    """,

    # Chrome runtime
    """
    window.chrome = {
        runtime: {}
    };
    """,
]


class StealthBrowser:
    """
    Launches the shared browser and scopes a stealth context per visit.

    Usage::

        async with stealth_browser.launch() as browser:
            async with stealth_browser.session(browser, identity) as page:
                ...
    """

    def __init__(self, headless: bool = True, args: List[str] | None = None):
        self.headless = headless
        self.args = list(args or [])

    @classmethod
    def from_settings(cls, settings: Settings) -> "StealthBrowser":
        return cls(headless=settings.headless, args=settings.browser_args)

    @asynccontextmanager
    async def launch(self) -> AsyncIterator[Browser]:
        """Start Playwright and Chromium; both are stopped on exit."""
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=self.headless, args=self.args)
            logger.info("Browser launched")
            try:
                yield browser
            finally:
                await browser.close()
                logger.info("Browser closed")

    @asynccontextmanager
    async def session(self, browser: Browser, identity: BrowsingIdentity) -> AsyncIterator[Page]:
        """
        Open a fresh context and page for one visit.

        Args:
            browser: Shared browser
            identity: Identity the context presents

        Yields:
            Page in the new context
        """
        context = await browser.new_context(**identity.to_context_options())
        try:
            for script in STEALTH_SCRIPTS:
                await context.add_init_script(script)
            page = await context.new_page()
            yield page
        finally:
            try:
                await context.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing browser context: {e}")
