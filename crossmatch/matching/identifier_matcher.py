# crossmatch/matching/identifier_matcher.py

"""Tier 1: exact UPC/EAN lookup on the target platform."""

import logging

from crossmatch.config.settings import Settings
from crossmatch.matching.lookup import LookupOutcome, lookup_candidates
from crossmatch.models.product import (
    MatchMethod,
    MatchResult,
    NormalizedProduct,
    Platform,
)
from crossmatch.providers.registry import ProviderRegistry

logger = logging.getLogger("crossmatch.matching")


class IdentifierMatcher:
    """Match by global product code; every hit is treated as definitive."""

    def __init__(self, providers: ProviderRegistry) -> None:
        self.providers = providers

    @staticmethod
    def select_identifier(product: NormalizedProduct) -> str | None:
        """Prefer the UPC, fall back to the EAN."""
        if product.upc:
            return product.upc
        if product.ean:
            return product.ean
        return None

    def lookup(
        self, source: NormalizedProduct, target_platform: Platform,
    ) -> LookupOutcome | None:
        """Run the identifier lookup; None when the source has no code."""
        identifier = self.select_identifier(source)
        if identifier is None:
            return None
        return lookup_candidates(
            self.providers,
            target_platform,
            lambda: self.providers.search_by_identifier(
                identifier, target_platform
            ),
            label=f"Identifier lookup {identifier}",
        )

    def match(
        self, source: NormalizedProduct, target_platform: Platform,
    ) -> list[MatchResult]:
        """Wrap every identifier hit at the fixed identifier confidence."""
        outcome = self.lookup(source, target_platform)
        if outcome is None:
            logger.debug(
                "No UPC/EAN on %s:%s, skipping identifier tier",
                source.platform.value,
                source.platform_id,
            )
            return []

        if not outcome.succeeded:
            logger.info(
                "Identifier tier unavailable on %s (%s)",
                target_platform.value,
                outcome.status.value,
            )
            return []

        results = [
            MatchResult(
                product=candidate,
                confidence=Settings.IDENTIFIER_CONFIDENCE,
                match_method=MatchMethod.IDENTIFIER_EXACT,
            )
            for candidate in outcome.candidates
        ]
        logger.info(
            "Identifier tier: %d matches on %s (%s)",
            len(results),
            target_platform.value,
            outcome.status.value,
        )
        return results
