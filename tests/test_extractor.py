"""Tests for price parsing and listing extraction."""

import re
from decimal import Decimal

import pytest

from fakes import FakeElement, FakePage, product_page
from price_sniper.ingest.base import Availability
from price_sniper.ingest.extractor import (
    ListingExtractor,
    PresenceProbe,
    TextProbe,
    classify_stock_text,
    parse_price,
)
from price_sniper.ingest.retailers.amazon import AmazonProfile


def make_extractor() -> ListingExtractor:
    return ListingExtractor(
        price_selector=AmazonProfile.PRICE_SELECTOR,
        availability_probes=AmazonProfile.AVAILABILITY_PROBES,
        price_wait_timeout_ms=10000,
    )


class TestParsePrice:
    """Test price text parsing."""

    def test_indian_grouping(self):
        assert parse_price("1,23,456") == Decimal("123456")

    def test_currency_symbols_and_whitespace(self):
        assert parse_price("₹ 2,499") == Decimal("2499")
        assert parse_price("$1,299.99") == Decimal("1299.99")
        assert parse_price(" €49 ") == Decimal("49")

    def test_trailing_decimal_point(self):
        # The whole-part element renders "1,299." before the fraction span
        assert parse_price("1,299.") == Decimal("1299")

    def test_unparseable_text_is_none(self):
        assert parse_price("Currently unavailable") is None
        assert parse_price("12abc") is None
        assert parse_price("-5") is None
        assert parse_price("1.2.3") is None
        assert parse_price("") is None
        assert parse_price(None) is None

    def test_parsed_prices_are_plain_decimals(self):
        pattern = re.compile(r"^[0-9]+(\.[0-9]+)?$")
        for text in ["1,23,456", "₹99", "$0.50", "10,000.25", "7."]:
            price = parse_price(text)
            assert price is not None
            assert price >= 0
            assert pattern.match(str(price))


class TestClassifyStockText:
    def test_in_stock(self):
        assert classify_stock_text("In Stock") is Availability.IN_STOCK
        assert classify_stock_text("Only 2 left in stock.") is Availability.IN_STOCK

    def test_out_of_stock(self):
        assert classify_stock_text("Currently OUT OF STOCK") is Availability.OUT_OF_STOCK

    def test_unrecognised(self):
        assert classify_stock_text("Usually dispatched in 3 days") is None
        assert classify_stock_text("") is None
        assert classify_stock_text(None) is None


@pytest.mark.asyncio
async def test_extract_price_and_stock_text():
    page = product_page(price_text="2,499.", stock_text="In stock")

    result = await make_extractor().extract_listing(page)

    assert result.price == Decimal("2499")
    assert result.availability is Availability.IN_STOCK
    assert page.wait_calls[0] == {"selector": ".a-price-whole", "timeout": 10000}


@pytest.mark.asyncio
async def test_add_to_cart_is_fallback_signal():
    page = product_page(price_text="1,23,456", add_to_cart=True)

    result = await make_extractor().extract_listing(page)

    assert result.price == Decimal("123456")
    assert result.availability is Availability.IN_STOCK


@pytest.mark.asyncio
async def test_text_probe_wins_over_add_to_cart():
    page = product_page(price_text="999", stock_text="Currently out of stock.", add_to_cart=True)

    result = await make_extractor().extract_listing(page)

    assert result.availability is Availability.OUT_OF_STOCK


@pytest.mark.asyncio
async def test_probes_are_tried_in_order():
    page = FakePage({
        ".a-price-whole": FakeElement("500"),
        "#availability span": FakeElement("Ships from Amazon"),
        ".a-color-success": FakeElement("In stock"),
        "#availability .a-color-state": FakeElement("Out of stock"),
    })

    result = await make_extractor().extract_listing(page)

    assert result.availability is Availability.IN_STOCK


@pytest.mark.asyncio
async def test_missing_price_element_is_none_not_error():
    page = FakePage({})

    result = await make_extractor().extract_listing(page)

    assert result.price is None
    assert result.availability is Availability.UNKNOWN


@pytest.mark.asyncio
async def test_garbage_price_text_is_none():
    page = product_page(price_text="See all buying options", add_to_cart=True)

    result = await make_extractor().extract_listing(page)

    assert result.price is None
    assert result.availability is Availability.IN_STOCK


@pytest.mark.asyncio
async def test_empty_price_text_is_none():
    page = product_page(price_text="   ")
    assert (await make_extractor().extract_listing(page)).price is None


@pytest.mark.asyncio
async def test_broken_probe_does_not_abort_other_probes():
    page = FakePage(
        {
            ".a-price-whole": FakeElement("1,000"),
            "#availability .a-color-state": FakeElement("Out of Stock"),
        },
        broken_selectors=["#availability span", ".a-color-success"],
    )

    result = await make_extractor().extract_listing(page)

    assert result.price == Decimal("1000")
    assert result.availability is Availability.OUT_OF_STOCK


@pytest.mark.asyncio
async def test_broken_price_lookup_is_none():
    page = FakePage({}, broken_selectors=[".a-price-whole"])
    assert (await make_extractor().extract_listing(page)).price is None


@pytest.mark.asyncio
async def test_adding_a_probe_is_a_data_change():
    extractor = ListingExtractor(
        price_selector=".price",
        availability_probes=[
            TextProbe("#stock"),
            PresenceProbe(".sold-out-banner", signal=Availability.OUT_OF_STOCK),
        ],
    )
    page = FakePage({".price": FakeElement("10"), ".sold-out-banner": FakeElement("")})

    result = await extractor.extract_listing(page)

    assert result.price == Decimal("10")
    assert result.availability is Availability.OUT_OF_STOCK
