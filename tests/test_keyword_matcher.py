# tests/test_keyword_matcher.py

"""Tests for the keyword (fuzzy) tier."""

import unittest

from crossmatch.config.settings import Settings
from crossmatch.matching.keyword_matcher import KeywordMatcher
from crossmatch.matching.lookup import LookupStatus
from crossmatch.models.product import MatchMethod, Platform
from crossmatch.providers.base_provider import ProviderError
from tests.fakes import FakeProvider, make_product, registry_with


def _candidates(n: int) -> list:
    """n eBay candidates with progressively less similar titles."""
    words = ["sony", "wh-1000xm4", "wireless", "headphones", "black"]
    return [
        make_product(
            platform=Platform.EBAY,
            platform_id=f"item-{i}",
            title=" ".join(words[: max(len(words) - i, 1)]),
            price=100.0 - i * 5,
            brand=None,
        )
        for i in range(n)
    ]


class TestKeywordMatcher(unittest.TestCase):
    """KeywordMatcher.match tests."""

    def setUp(self) -> None:
        self.source = make_product(
            title="Sony WH-1000XM4 Wireless Headphones (Black, 2021 Model)",
            price=100.0,
        )

    def test_query_sent_to_provider(self) -> None:
        """The cleaned, brand-led query is used for the search."""
        ebay = FakeProvider(Platform.EBAY)
        KeywordMatcher(registry_with(ebay)).match(
            self.source, Platform.EBAY
        )
        self.assertEqual(
            ebay.query_calls, ["Sony WH-1000XM4 Wireless Headphones"]
        )

    def test_sorted_descending_and_truncated(self) -> None:
        """Results are sorted by confidence and capped at five."""
        candidates = _candidates(8)
        ebay = FakeProvider(Platform.EBAY, query_results=candidates)
        results = KeywordMatcher(registry_with(ebay)).match(
            self.source, Platform.EBAY
        )

        self.assertEqual(len(results), Settings.MAX_KEYWORD_MATCHES)
        confidences = [r.confidence for r in results]
        self.assertEqual(
            confidences, sorted(confidences, reverse=True)
        )

    def test_best_candidate_first(self) -> None:
        """Input order does not decide ranking."""
        candidates = [
            make_product(
                platform=Platform.EBAY, platform_id="bad",
                title="Phone case", price=10.0, brand=None,
            ),
            make_product(
                platform=Platform.EBAY, platform_id="mid",
                title="Sony headphones", price=90.0, brand=None,
            ),
            make_product(
                platform=Platform.EBAY, platform_id="good",
                title=self.source.title, price=100.0,
            ),
        ]
        ebay = FakeProvider(Platform.EBAY, query_results=candidates)
        results = KeywordMatcher(registry_with(ebay)).match(
            self.source, Platform.EBAY
        )
        self.assertEqual(
            [r.product.platform_id for r in results],
            ["good", "mid", "bad"],
        )

    def test_method_and_cap(self) -> None:
        """Every result is keyword-fuzzy with confidence ≤ 0.85."""
        perfect = make_product(
            platform=Platform.EBAY,
            platform_id="perfect",
            title=self.source.title,
            price=self.source.price,
        )
        ebay = FakeProvider(
            Platform.EBAY, query_results=[perfect, *_candidates(3)]
        )
        results = KeywordMatcher(registry_with(ebay)).match(
            self.source, Platform.EBAY
        )
        for r in results:
            with self.subTest(pid=r.product.platform_id):
                self.assertEqual(
                    r.match_method, MatchMethod.KEYWORD_FUZZY
                )
                self.assertGreaterEqual(r.confidence, 0.0)
                self.assertLessEqual(r.confidence, 0.85)
        self.assertEqual(results[0].confidence, 0.85)

    def test_no_candidates(self) -> None:
        ebay = FakeProvider(Platform.EBAY)
        matcher = KeywordMatcher(registry_with(ebay))
        self.assertEqual(
            matcher.lookup(self.source, Platform.EBAY).status,
            LookupStatus.EMPTY,
        )
        self.assertEqual(matcher.match(self.source, Platform.EBAY), [])

    def test_unconfigured_provider(self) -> None:
        """An unconfigured platform is never searched."""
        ebay = FakeProvider(
            Platform.EBAY,
            query_results=_candidates(2),
            configured=False,
        )
        results = KeywordMatcher(registry_with(ebay)).match(
            self.source, Platform.EBAY
        )
        self.assertEqual(results, [])
        self.assertEqual(ebay.query_calls, [])

    def test_provider_error_degrades(self) -> None:
        """A failing search yields an empty list."""
        ebay = FakeProvider(
            Platform.EBAY, error=ProviderError("timeout")
        )
        matcher = KeywordMatcher(registry_with(ebay))
        outcome = matcher.lookup(self.source, Platform.EBAY)
        self.assertEqual(outcome.status, LookupStatus.FAILED)
        self.assertFalse(outcome.succeeded)
        with self.assertLogs("crossmatch.matching", level="INFO") as logs:
            self.assertEqual(matcher.match(self.source, Platform.EBAY), [])
        self.assertTrue(
            any("unavailable on ebay (failed)" in line for line in logs.output)
        )


if __name__ == "__main__":
    unittest.main()
