# crossmatch/providers/schemas.py

"""Validated shapes of the raw provider responses.

Each provider's JSON is parsed into these models before normalization, so
a field of the wrong type is rejected here instead of surfacing later
as a bad score.  Unknown fields are ignored.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crossmatch.providers.base_provider import ProviderError

logger = logging.getLogger("crossmatch.providers")


class _Raw(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ── Rainforest (Amazon) ─────────────────────────────────


class RainforestPrice(_Raw):
    value: float | None = None
    currency: str | None = None


class RainforestNamed(_Raw):
    name: str | None = None
    value: str | None = None


class RainforestImage(_Raw):
    link: str | None = None
    variant: str | None = None


class RainforestShipping(_Raw):
    raw: str | None = None
    value: float | None = None


class RainforestAvailability(_Raw):
    raw: str | None = None


class RainforestFulfillment(_Raw):
    type: str | None = None


class RainforestBuybox(_Raw):
    price: RainforestPrice | None = None
    shipping: RainforestShipping | None = None
    availability: RainforestAvailability | None = None
    fulfillment: RainforestFulfillment | None = None


class RainforestProduct(_Raw):
    asin: str | None = None
    title: str | None = None
    link: str | None = None
    brand: str | None = None
    price: RainforestPrice | None = None
    list_price: RainforestPrice | None = None
    rating: float | None = None
    ratings_total: int | None = None
    main_image: RainforestImage | None = None
    images: list[RainforestImage] = Field(default_factory=list)
    specifications: list[RainforestNamed] = Field(default_factory=list)
    attributes: list[RainforestNamed] = Field(default_factory=list)
    categories: list[RainforestNamed] = Field(default_factory=list)
    buybox_winner: RainforestBuybox | None = None


class RainforestSearchItem(_Raw):
    asin: str | None = None
    title: str | None = None
    link: str | None = None
    brand: str | None = None
    image: str | None = None
    price: RainforestPrice | None = None
    rating: float | None = None
    ratings_total: int | None = None


# ── eBay Browse API ─────────────────────────────────────


class EbayAmount(_Raw):
    value: str | None = None
    currency: str | None = None


class EbayImage(_Raw):
    imageUrl: str | None = None


class EbaySeller(_Raw):
    username: str | None = None
    feedbackPercentage: str | None = None


class EbayShippingOption(_Raw):
    shippingCost: EbayAmount | None = None
    type: str | None = None


class EbayAspect(_Raw):
    name: str | None = None
    value: str | None = None


class EbayAvailability(_Raw):
    estimatedAvailabilityStatus: str | None = None


class EbayReviewRating(_Raw):
    reviewCount: int | None = None
    averageRating: str | None = None


class EbayItemSummary(_Raw):
    itemId: str | None = None
    title: str | None = None
    price: EbayAmount | None = None
    image: EbayImage | None = None
    condition: str | None = None
    seller: EbaySeller | None = None
    itemWebUrl: str | None = None
    shippingOptions: list[EbayShippingOption] = Field(
        default_factory=list
    )


class EbayItem(EbayItemSummary):
    brand: str | None = None
    gtin: str | None = None
    categoryPath: str | None = None
    localizedAspects: list[EbayAspect] = Field(default_factory=list)
    estimatedAvailabilities: list[EbayAvailability] = Field(
        default_factory=list
    )
    primaryProductReviewRating: EbayReviewRating | None = None


class EbayTokenResponse(_Raw):
    access_token: str
    expires_in: int
    token_type: str | None = None


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_items(
    model: type[ModelT], items: Any,
) -> list[ModelT]:
    """Validate each raw item, dropping the ones that do not fit *model*.

    A missing container (``None``) means no results.  Anything else that
    is not a list is a malformed response and raises
    :class:`ProviderError`.
    """
    if items is None:
        return []
    if not isinstance(items, list):
        raise ProviderError(
            f"Expected a list of {model.__name__}, got {type(items).__name__}"
        )
    valid: list[ModelT] = []
    dropped = 0
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as exc:
            dropped += 1
            logger.debug(
                "Dropped malformed %s: %s", model.__name__, exc
            )
    if dropped:
        logger.info(
            "Schema validation dropped %d malformed %s items",
            dropped,
            model.__name__,
        )
    return valid
