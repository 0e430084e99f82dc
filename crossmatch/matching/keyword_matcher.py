# crossmatch/matching/keyword_matcher.py

"""Tier 2: keyword search on the target platform, ranked by similarity."""

import logging

from crossmatch.config.settings import Settings
from crossmatch.matching.lookup import LookupOutcome, lookup_candidates
from crossmatch.matching.query_builder import QueryBuilder
from crossmatch.matching.scorer import SimilarityScorer
from crossmatch.models.product import (
    MatchMethod,
    MatchResult,
    NormalizedProduct,
    Platform,
)
from crossmatch.providers.registry import ProviderRegistry

logger = logging.getLogger("crossmatch.matching")


class KeywordMatcher:
    """Search by a query derived from the source title and rank the hits."""

    def __init__(self, providers: ProviderRegistry) -> None:
        self.providers = providers

    def lookup(
        self, source: NormalizedProduct, target_platform: Platform,
    ) -> LookupOutcome:
        """Issue the single keyword search for *source*."""
        query = QueryBuilder.build_search_query(source)
        return lookup_candidates(
            self.providers,
            target_platform,
            lambda: self.providers.search_by_query(query, target_platform),
            label=f"Keyword search '{query}'",
        )

    @staticmethod
    def rank(
        source: NormalizedProduct,
        candidates: tuple[NormalizedProduct, ...] | list[NormalizedProduct],
    ) -> list[MatchResult]:
        """Score, sort descending and keep the top MAX_KEYWORD_MATCHES."""
        scored = [
            MatchResult(
                product=candidate,
                confidence=SimilarityScorer.capped_score(
                    source, candidate
                ),
                match_method=MatchMethod.KEYWORD_FUZZY,
            )
            for candidate in candidates
        ]
        scored.sort(key=lambda r: r.confidence, reverse=True)
        return scored[: Settings.MAX_KEYWORD_MATCHES]

    def match(
        self, source: NormalizedProduct, target_platform: Platform,
    ) -> list[MatchResult]:
        """Ranked fuzzy matches; empty when the provider is down or unset."""
        outcome = self.lookup(source, target_platform)
        if not outcome.succeeded:
            logger.info(
                "Keyword tier unavailable on %s (%s)",
                target_platform.value,
                outcome.status.value,
            )
            return []

        results = self.rank(source, outcome.candidates)
        logger.info(
            "Keyword tier: %d of %d candidates kept on %s (%s)",
            len(results),
            len(outcome.candidates),
            target_platform.value,
            outcome.status.value,
        )
        return results
