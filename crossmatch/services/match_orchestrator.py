# crossmatch/services/match_orchestrator.py

"""Runs the matching tiers for one source listing, behind the result cache."""

import logging

from crossmatch.config.settings import CacheTTL
from crossmatch.matching.identifier_matcher import IdentifierMatcher
from crossmatch.matching.keyword_matcher import KeywordMatcher
from crossmatch.models.product import (
    MatchResult,
    NormalizedProduct,
    Platform,
    other_platform,
)
from crossmatch.providers.registry import ProviderRegistry
from crossmatch.storage.cache_backends import build_cache_backend
from crossmatch.storage.result_cache import ResultCache

logger = logging.getLogger("crossmatch.orchestrator")


def match_cache_key(source: NormalizedProduct) -> str:
    """Cache key for a source listing's match list."""
    return f"match:{source.platform.value}:{source.platform_id}"


def product_cache_key(platform: Platform, platform_id: str) -> str:
    """Cache key for a fetched listing detail record."""
    return f"product:{platform.value}:{platform_id}"


def _dump_matches(matches: list[MatchResult]) -> list[dict]:
    return [m.to_dict() for m in matches]


def _load_matches(data: list[dict]) -> list[MatchResult]:
    return [MatchResult.from_dict(d) for d in data]


class MatchOrchestrator:
    """Identifier tier first, keyword tier only if it finds nothing.

    Tiers are never merged or retried.  The outcome, including an empty
    list, is cached per source listing for ``CacheTTL.MATCH`` seconds.
    """

    def __init__(
        self,
        providers: ProviderRegistry,
        cache: ResultCache | None = None,
        identifier_matcher: IdentifierMatcher | None = None,
        keyword_matcher: KeywordMatcher | None = None,
    ) -> None:
        self.providers = providers
        self.cache = cache or ResultCache(None)
        self.identifier_matcher = (
            identifier_matcher or IdentifierMatcher(providers)
        )
        self.keyword_matcher = (
            keyword_matcher or KeywordMatcher(providers)
        )

    @classmethod
    def from_settings(cls) -> "MatchOrchestrator":
        """Wire providers and the cache backend from Settings."""
        cache = ResultCache(build_cache_backend())
        if not cache.enabled:
            logger.info("Result caching disabled, every call hits providers")
        return cls(providers=ProviderRegistry.from_settings(), cache=cache)

    def fetch_source(
        self, platform: Platform, platform_id: str,
    ) -> NormalizedProduct:
        """Detail record for the source listing, cached for CacheTTL.PRODUCT.

        A failed fetch raises :class:`ProviderError` and is not cached.
        """
        return self.cache.get_or_compute(
            product_cache_key(platform, platform_id),
            CacheTTL.PRODUCT,
            lambda: self.providers.fetch_product(platform_id, platform),
            dump=NormalizedProduct.to_dict,
            load=NormalizedProduct.from_dict,
        )

    def _run_tiers(self, source: NormalizedProduct) -> list[MatchResult]:
        target = other_platform(source.platform)

        matches = self.identifier_matcher.match(source, target)
        if matches:
            return matches

        return self.keyword_matcher.match(source, target)

    def find_matches(
        self, source: NormalizedProduct,
    ) -> list[MatchResult]:
        """Ranked matches for *source* on the other platform."""
        key = match_cache_key(source)
        matches = self.cache.get_or_compute(
            key,
            CacheTTL.MATCH,
            lambda: self._run_tiers(source),
            dump=_dump_matches,
            load=_load_matches,
        )
        logger.info(
            "Found %d matches for %s", len(matches), key
        )
        return matches

    def invalidate(self, source: NormalizedProduct) -> None:
        """Forget the cached matches for *source*."""
        self.cache.invalidate(match_cache_key(source))
