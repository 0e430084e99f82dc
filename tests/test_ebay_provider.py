# tests/test_ebay_provider.py

"""Tests for the eBay Browse API provider using mocked HTTP responses."""

import unittest
from typing import Any
from unittest.mock import MagicMock

from crossmatch.models.product import Platform
from crossmatch.providers.base_provider import (
    ProviderError,
    ProviderNotConfiguredError,
)
from crossmatch.providers.ebay_provider import (
    EbayProvider,
    normalize_ebay_item,
    normalize_ebay_summary,
)
from crossmatch.providers.registry import ProviderRegistry
from crossmatch.providers.schemas import EbayItem, EbayItemSummary
from crossmatch.services.match_orchestrator import MatchOrchestrator
from tests.fakes import make_product

SEARCH_BODY: dict[str, Any] = {
    "total": 3,
    "itemSummaries": [
        {
            "itemId": "v1|325123456789|0",
            "title": "Sony WH-1000XM4 Wireless Noise Canceling Headphones",
            "price": {"value": "229.99", "currency": "USD"},
            "image": {"imageUrl": "https://i.ebayimg.com/xm4.jpg"},
            "condition": "New",
            "seller": {"username": "audio_outlet"},
            "itemWebUrl": "https://www.ebay.com/itm/325123456789",
            "shippingOptions": [
                {"shippingCost": {"value": "5.99", "currency": "USD"}}
            ],
        },
        {"title": "No item id"},
        {"itemId": "v1|2|0", "title": "Broken", "shippingOptions": "x"},
    ],
}

ITEM_BODY: dict[str, Any] = {
    "itemId": "v1|325123456789|0",
    "title": "Sony WH-1000XM4",
    "price": {"value": "229.99", "currency": "USD"},
    "categoryPath": "Consumer Electronics|Headphones",
    "gtin": "027242919419",
    "localizedAspects": [
        {"name": "Brand", "value": "Sony"},
        {"name": "Color", "value": "Black"},
    ],
    "estimatedAvailabilities": [
        {"estimatedAvailabilityStatus": "IN_STOCK"}
    ],
    "primaryProductReviewRating": {
        "reviewCount": 87,
        "averageRating": "4.6",
    },
}


def _response(body: Any, status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    return resp


def _token_client(configured: bool = True) -> MagicMock:
    client = MagicMock()
    client.is_configured = configured
    client.get_token.return_value = "tok-123"
    return client


class TestEbayProvider(unittest.TestCase):
    """EbayProvider request/response handling."""

    def setUp(self) -> None:
        self.session = MagicMock()
        self.tokens = _token_client()
        self.provider = EbayProvider(token_client=self.tokens)
        self.provider.session = self.session

    def test_query_search_params_and_headers(self) -> None:
        self.session.get.return_value = _response(SEARCH_BODY)
        self.provider.search_by_query("sony xm4")

        args, kwargs = self.session.get.call_args
        self.assertTrue(args[0].endswith("/buy/browse/v1/item_summary/search"))
        self.assertEqual(kwargs["params"], {"limit": "10", "q": "sony xm4"})
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok-123")
        self.assertEqual(
            kwargs["headers"]["X-EBAY-C-MARKETPLACE-ID"], "EBAY_US"
        )

    def test_identifier_uses_gtin_filter(self) -> None:
        self.session.get.return_value = _response(SEARCH_BODY)
        self.provider.search_by_identifier("027242919419")
        _, kwargs = self.session.get.call_args
        self.assertEqual(
            kwargs["params"], {"limit": "10", "gtin": "027242919419"}
        )

    def test_search_normalizes_and_drops_bad_items(self) -> None:
        self.session.get.return_value = _response(SEARCH_BODY)
        products = self.provider.search_by_query("sony")

        self.assertEqual(len(products), 1)
        product = products[0]
        self.assertIs(product.platform, Platform.EBAY)
        self.assertEqual(product.platform_id, "v1|325123456789|0")
        self.assertEqual(product.price, 229.99)
        self.assertEqual(product.shipping_cost, 5.99)
        self.assertEqual(product.seller, "audio_outlet")

    def test_missing_summaries(self) -> None:
        self.session.get.return_value = _response({"total": 0})
        self.assertEqual(self.provider.search_by_query("zzz"), [])

    def test_non_list_summaries_raise(self) -> None:
        self.session.get.return_value = _response({"itemSummaries": 5})
        with self.assertRaises(ProviderError):
            self.provider.search_by_query("sony")

    def test_non_list_summaries_degrade_to_no_matches(self) -> None:
        """A malformed container on the target side yields no matches."""
        self.session.get.return_value = _response({"itemSummaries": "x"})
        orchestrator = MatchOrchestrator(
            ProviderRegistry({Platform.EBAY: self.provider})
        )
        source = make_product(upc="027242919419")
        self.assertEqual(orchestrator.find_matches(source), [])
        self.assertEqual(self.session.get.call_count, 2)

    def test_http_error_raises(self) -> None:
        self.session.get.return_value = _response({}, status=401)
        with self.assertRaises(ProviderError):
            self.provider.search_by_query("sony")

    def test_token_failure_raises_provider_error(self) -> None:
        self.tokens.get_token.side_effect = ProviderError("auth 401")
        with self.assertRaises(ProviderError):
            self.provider.search_by_query("sony")
        self.session.get.assert_not_called()

    def test_unconfigured(self) -> None:
        provider = EbayProvider(token_client=_token_client(False))
        provider.session = self.session
        self.assertFalse(provider.is_configured())
        with self.assertRaises(ProviderNotConfiguredError):
            provider.search_by_query("sony")
        self.session.get.assert_not_called()

    def test_fetch_product_v1_id(self) -> None:
        self.session.get.return_value = _response(ITEM_BODY)
        product = self.provider.fetch_product("325123456789")

        args, _ = self.session.get.call_args
        self.assertTrue(args[0].endswith("/item/v1|325123456789|0"))
        self.assertEqual(product.upc, "027242919419")

    def test_fetch_product_falls_back_to_raw_id(self) -> None:
        self.session.get.side_effect = [
            _response({}, status=404),
            _response(ITEM_BODY),
        ]
        product = self.provider.fetch_product("325123456789")

        urls = [c.args[0] for c in self.session.get.call_args_list]
        self.assertEqual(len(urls), 2)
        self.assertTrue(urls[1].endswith("/item/325123456789"))
        self.assertEqual(product.brand, "Sony")

    def test_fetch_product_both_forms_fail(self) -> None:
        self.session.get.return_value = _response({}, status=404)
        with self.assertRaises(ProviderError):
            self.provider.fetch_product("325123456789")


class TestEbayNormalization(unittest.TestCase):
    """Pure normalization functions."""

    def test_item_brand_from_aspects(self) -> None:
        product = normalize_ebay_item(EbayItem.model_validate(ITEM_BODY))
        assert product is not None
        self.assertEqual(product.brand, "Sony")
        self.assertEqual(product.category, "Consumer Electronics|Headphones")
        self.assertEqual(product.rating.average, 4.6)
        self.assertEqual(product.rating.count, 87)
        self.assertEqual(product.availability, "IN_STOCK")
        self.assertEqual(
            [s.name for s in product.specs], ["Brand", "Color"]
        )

    def test_item_explicit_brand_wins(self) -> None:
        data = {**ITEM_BODY, "brand": "SONY"}
        product = normalize_ebay_item(EbayItem.model_validate(data))
        assert product is not None
        self.assertEqual(product.brand, "SONY")

    def test_unparseable_price_is_zero(self) -> None:
        product = normalize_ebay_summary(
            EbayItemSummary.model_validate(
                {"itemId": "1", "price": {"value": "N/A"}}
            )
        )
        assert product is not None
        self.assertEqual(product.price, 0.0)
        self.assertIsNone(product.shipping_cost)
        self.assertIsNone(product.brand)

    def test_summary_without_id(self) -> None:
        self.assertIsNone(
            normalize_ebay_summary(EbayItemSummary(title="x"))
        )


if __name__ == "__main__":
    unittest.main()
