"""Listing extraction: price and availability from a loaded product page."""

import logging
import re
import unicodedata
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence, Tuple

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from price_sniper.ingest.base import Availability, ExtractionResult

logger = logging.getLogger(__name__)


PRICE_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")

IN_STOCK_TEXT = "in stock"
OUT_OF_STOCK_TEXT = "out of stock"


def parse_price(price_text: Optional[str]) -> Optional[Decimal]:
    """
    Parse a displayed price into a Decimal.

    Currency symbols, thousands separators and whitespace are removed, so
    both "1,299" and "₹1,23,456." parse. Anything else left over makes the
    text unparseable.

    Args:
        price_text: Text of the price element

    Returns:
        Non-negative Decimal, or None if the text is not a price
    """
    if not price_text:
        return None

    cleaned = "".join(
        ch for ch in price_text
        if ch != "," and not ch.isspace() and unicodedata.category(ch) != "Sc"
    )
    # The whole-part element keeps the decimal point: "1,299."
    if cleaned.endswith("."):
        cleaned = cleaned[:-1]

    if not PRICE_PATTERN.fullmatch(cleaned):
        return None

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def classify_stock_text(text: Optional[str]) -> Optional[Availability]:
    """Map stock-status text to an availability, or None if unrecognised."""
    if not text:
        return None
    lowered = text.lower()
    if IN_STOCK_TEXT in lowered:
        return Availability.IN_STOCK
    if OUT_OF_STOCK_TEXT in lowered:
        return Availability.OUT_OF_STOCK
    return None


# =============================================================================
# Availability probes
# =============================================================================

@dataclass(frozen=True)
class TextProbe:
    """Reads stock-status text from the first element matching ``selector``."""

    selector: str

    async def probe(self, page: Page) -> Optional[Availability]:
        try:
            element = await page.query_selector(self.selector)
            if element is None:
                return None
            return classify_stock_text(await element.text_content())
        except PlaywrightError as e:
            logger.debug(f"Availability probe {self.selector} failed: {e}")
            return None


@dataclass(frozen=True)
class PresenceProbe:
    """Reports ``signal`` if any element matches ``selector``.

    Used for purchase controls, which only weakly imply stock.
    """

    selector: str
    signal: Availability = Availability.IN_STOCK

    async def probe(self, page: Page) -> Optional[Availability]:
        try:
            element = await page.query_selector(self.selector)
        except PlaywrightError as e:
            logger.debug(f"Presence probe {self.selector} failed: {e}")
            return None
        return self.signal if element is not None else None


class ListingExtractor:
    """Extracts price and availability, tolerating missing elements.

    Probes run in order and the first one with a signal wins; a page with
    no signal at all yields ``unknown``.
    """

    def __init__(
        self,
        price_selector: str,
        availability_probes: Sequence,
        price_wait_timeout_ms: int = 10000,
    ):
        self.price_selector = price_selector
        self.availability_probes: Tuple = tuple(availability_probes)
        self.price_wait_timeout_ms = price_wait_timeout_ms

    async def extract_listing(self, page: Page) -> ExtractionResult:
        """
        Extract a listing from the current page. Never raises for DOM misses.

        Args:
            page: Loaded Playwright page

        Returns:
            ExtractionResult; price None if not found
        """
        price = await self.extract_price(page)
        availability = await self.extract_availability(page)
        return ExtractionResult(price=price, availability=availability)

    async def extract_price(self, page: Page) -> Optional[Decimal]:
        try:
            element = await page.wait_for_selector(
                self.price_selector, timeout=self.price_wait_timeout_ms
            )
        except PlaywrightTimeoutError:
            logger.info(
                f"Price element {self.price_selector} did not appear "
                f"within {self.price_wait_timeout_ms}ms"
            )
            return None
        except PlaywrightError as e:
            logger.info(f"Price element lookup failed: {e}")
            return None

        if element is None:
            logger.info("Price element not found")
            return None

        try:
            price_text = await element.text_content()
        except PlaywrightError as e:
            logger.info(f"Could not read price element text: {e}")
            return None

        if not price_text or not price_text.strip():
            logger.info("Price element found but has no text content")
            return None

        price = parse_price(price_text)
        if price is None:
            logger.info(f"Could not parse price: {price_text!r}")
        return price

    async def extract_availability(self, page: Page) -> Availability:
        for probe in self.availability_probes:
            signal = await probe.probe(page)
            if signal is not None:
                logger.debug(f"Availability {signal.value} from {probe.selector}")
                return signal
        return Availability.UNKNOWN
