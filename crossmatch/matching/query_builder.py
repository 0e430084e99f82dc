# crossmatch/matching/query_builder.py

"""Search-query construction from a source listing's title and brand."""

import logging
import re

from crossmatch.config.settings import Settings
from crossmatch.models.product import NormalizedProduct

logger = logging.getLogger("crossmatch.matching")

_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
_BRACKETED_RE = re.compile(r"\[[^\]]*\]")
# "2 pack", ", 12 Count", "6pk" and friends
_PACK_SIZE_RE = re.compile(
    r",?\s*\b\d+\s*-?\s*(?:pack|count|piece|ct|pk)s?\b",
    re.IGNORECASE,
)


class QueryBuilder:
    """Turn a listing into a short keyword query for the other platform."""

    @staticmethod
    def clean_title(title: str) -> str:
        """Strip (...), [...] and pack sizes, then collapse whitespace."""
        cleaned = _PARENTHETICAL_RE.sub("", title)
        cleaned = _BRACKETED_RE.sub("", cleaned)
        cleaned = _PACK_SIZE_RE.sub("", cleaned)
        return " ".join(cleaned.split())

    @staticmethod
    def build_search_query(product: NormalizedProduct) -> str:
        """Brand (if any) followed by up to QUERY_TITLE_TOKENS title words.

        The title's first word is skipped when it repeats the brand.
        """
        words = QueryBuilder.clean_title(product.title).split()
        parts: list[str] = []

        start = 0
        if product.brand:
            parts.append(product.brand)
            if words and words[0].lower() == product.brand.lower():
                start = 1

        parts.extend(
            words[start:start + Settings.QUERY_TITLE_TOKENS]
        )
        query = " ".join(parts)
        logger.debug(
            "Built query '%s' from title '%s'", query, product.title
        )
        return query
