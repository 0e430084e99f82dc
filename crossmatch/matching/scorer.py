# crossmatch/matching/scorer.py

"""Deterministic similarity score between two listings."""

from crossmatch.config.settings import Settings
from crossmatch.models.product import NormalizedProduct


class SimilarityScorer:
    """Weighted blend of title, brand and price signals.

    Each signal is in [0, 1] and the weights sum to 1.0, so the total
    is in [0, 1] as well.
    """

    @staticmethod
    def _tokens(title: str) -> set[str]:
        return set(title.lower().split())

    @staticmethod
    def title_similarity(a: str, b: str) -> float:
        """Jaccard similarity of the lower-cased word sets."""
        words_a = SimilarityScorer._tokens(a)
        words_b = SimilarityScorer._tokens(b)
        union = words_a | words_b
        if not union:
            return 0.0
        return len(words_a & words_b) / len(union)

    @staticmethod
    def brand_match(
        source: NormalizedProduct, candidate: NormalizedProduct,
    ) -> float:
        """1.0 when both brands are set and equal ignoring case."""
        if not source.brand or not candidate.brand:
            return 0.0
        if source.brand.lower() == candidate.brand.lower():
            return 1.0
        return 0.0

    @staticmethod
    def price_proximity(price_a: float, price_b: float) -> float:
        """min/max price ratio; 0 unless both prices are positive."""
        if price_a <= 0 or price_b <= 0:
            return 0.0
        return min(price_a, price_b) / max(price_a, price_b)

    @staticmethod
    def score(
        source: NormalizedProduct, candidate: NormalizedProduct,
    ) -> float:
        """Weighted sum of the three signals, in [0, 1]."""
        title = SimilarityScorer.title_similarity(
            source.title, candidate.title
        )
        brand = SimilarityScorer.brand_match(source, candidate)
        price = SimilarityScorer.price_proximity(
            source.price, candidate.price
        )
        return (
            title * Settings.TITLE_WEIGHT
            + brand * Settings.BRAND_WEIGHT
            + price * Settings.PRICE_WEIGHT
        )

    @staticmethod
    def capped_score(
        source: NormalizedProduct, candidate: NormalizedProduct,
    ) -> float:
        """Score for keyword ranking, kept below identifier confidence."""
        return min(
            SimilarityScorer.score(source, candidate),
            Settings.KEYWORD_CONFIDENCE_CAP,
        )
