"""Amazon listing profile: where prices, stock text and search results live."""

from dataclasses import dataclass
from typing import Tuple

from price_sniper.config import Settings
from price_sniper.ingest.extractor import ListingExtractor, PresenceProbe, TextProbe


@dataclass(frozen=True)
class SiteProfile:
    """Selectors and URLs for the one retail site being monitored."""

    domain: str
    search_base: str
    price_selector: str
    search_result_selector: str
    availability_probes: Tuple


class AmazonProfile:
    """Amazon product and search page markup."""

    PRICE_SELECTOR = ".a-price-whole"

    # First element carrying a product id on the search results page
    SEARCH_RESULT_SELECTOR = "[data-asin]"

    # Ordered by priority; markup differs across listing types and redesigns
    AVAILABILITY_PROBES = (
        TextProbe("#availability span"),
        TextProbe(".a-color-success"),
        TextProbe("#availability .a-color-state"),
        PresenceProbe("#add-to-cart-button, #buy-now-button"),
    )

    @classmethod
    def build(cls, settings: Settings) -> SiteProfile:
        return SiteProfile(
            domain=settings.site_domain,
            search_base=settings.search_base,
            price_selector=cls.PRICE_SELECTOR,
            search_result_selector=cls.SEARCH_RESULT_SELECTOR,
            availability_probes=cls.AVAILABILITY_PROBES,
        )


def build_extractor(profile: SiteProfile, settings: Settings) -> ListingExtractor:
    """Create an extractor for ``profile``."""
    return ListingExtractor(
        price_selector=profile.price_selector,
        availability_probes=profile.availability_probes,
        price_wait_timeout_ms=settings.price_wait_timeout_ms,
    )
