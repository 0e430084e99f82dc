# tests/test_provider_registry.py

"""Tests for the platform-keyed provider registry."""

import unittest

from crossmatch.models.product import Platform
from crossmatch.providers.amazon_provider import AmazonProvider
from crossmatch.providers.base_provider import ProviderNotConfiguredError
from crossmatch.providers.ebay_provider import EbayProvider
from crossmatch.providers.registry import ProviderRegistry
from tests.fakes import FakeProvider, make_product, registry_with


class TestProviderRegistry(unittest.TestCase):
    """Routing and configuration checks."""

    def test_from_settings_loads_both_providers(self) -> None:
        registry = ProviderRegistry.from_settings()
        self.assertIsInstance(registry.get(Platform.AMAZON), AmazonProvider)
        self.assertIsInstance(registry.get(Platform.EBAY), EbayProvider)
        self.assertEqual(len(registry.all()), 2)

    def test_routes_to_platform(self) -> None:
        hit = make_product(platform=Platform.EBAY, platform_id="e1")
        ebay = FakeProvider(
            Platform.EBAY, query_results=[hit], identifier_results=[hit]
        )
        amazon = FakeProvider(Platform.AMAZON)
        registry = registry_with(amazon, ebay)

        self.assertEqual(
            registry.search_by_query("sony", Platform.EBAY), [hit]
        )
        self.assertEqual(
            registry.search_by_identifier("0123", Platform.EBAY), [hit]
        )
        self.assertEqual(registry.fetch_product("e1", Platform.EBAY), hit)
        self.assertEqual(ebay.query_calls, ["sony"])
        self.assertEqual(amazon.query_calls, [])

    def test_unregistered_platform(self) -> None:
        registry = registry_with(FakeProvider(Platform.AMAZON))
        self.assertIsNone(registry.get(Platform.EBAY))
        self.assertFalse(registry.is_configured(Platform.EBAY))
        with self.assertRaises(ProviderNotConfiguredError):
            registry.search_by_query("sony", Platform.EBAY)

    def test_unconfigured_provider_is_not_called(self) -> None:
        ebay = FakeProvider(Platform.EBAY, configured=False)
        registry = registry_with(ebay)
        self.assertFalse(registry.is_configured(Platform.EBAY))
        with self.assertRaises(ProviderNotConfiguredError):
            registry.search_by_identifier("0123", Platform.EBAY)
        self.assertEqual(ebay.identifier_calls, [])


if __name__ == "__main__":
    unittest.main()
