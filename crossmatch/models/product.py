# crossmatch/models/product.py

"""Platform-agnostic product and match records."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Platform(Enum):
    """The two marketplaces the matcher works across."""

    AMAZON = "amazon"
    EBAY = "ebay"


def other_platform(platform: Platform) -> Platform:
    """Return the marketplace that is not *platform*."""
    if platform is Platform.AMAZON:
        return Platform.EBAY
    return Platform.AMAZON


class MatchMethod(Enum):
    """How a match was found."""

    IDENTIFIER_EXACT = "identifier-exact"
    KEYWORD_FUZZY = "keyword-fuzzy"
    ADVISORY = "advisory"  # reserved, no tier produces it yet


@dataclass(frozen=True)
class ProductRating:
    """Average star rating (0-5) and number of ratings."""

    average: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class ProductSpec:
    """A single name/value specification row."""

    name: str
    value: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class NormalizedProduct:
    """A single listing from either marketplace.

    ``platform`` + ``platform_id`` identify the listing and always come
    from a real provider lookup.  ``id`` is an opaque per-process handle.
    """

    platform: Platform
    platform_id: str
    title: str
    price: float
    currency: str = "USD"
    shipping_cost: float | None = None
    list_price: float | None = None
    brand: str | None = None
    category: str | None = None
    specs: tuple[ProductSpec, ...] = ()
    rating: ProductRating = field(default_factory=ProductRating)
    upc: str | None = None
    ean: str | None = None
    url: str = ""
    image_url: str = ""
    condition: str | None = None
    availability: str | None = None
    seller: str | None = None
    fetched_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible snapshot."""
        return {
            "id": self.id,
            "platform": self.platform.value,
            "platform_id": self.platform_id,
            "title": self.title,
            "price": self.price,
            "currency": self.currency,
            "shipping_cost": self.shipping_cost,
            "list_price": self.list_price,
            "brand": self.brand,
            "category": self.category,
            "specs": [
                {"name": s.name, "value": s.value}
                for s in self.specs
            ],
            "rating": {
                "average": self.rating.average,
                "count": self.rating.count,
            },
            "upc": self.upc,
            "ean": self.ean,
            "url": self.url,
            "image_url": self.image_url,
            "condition": self.condition,
            "availability": self.availability,
            "seller": self.seller,
            "fetched_at": self.fetched_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedProduct":
        """Rebuild a product from a :meth:`to_dict` snapshot."""
        rating = data.get("rating") or {}
        return cls(
            id=data["id"],
            platform=Platform(data["platform"]),
            platform_id=data["platform_id"],
            title=data["title"],
            price=data["price"],
            currency=data.get("currency", "USD"),
            shipping_cost=data.get("shipping_cost"),
            list_price=data.get("list_price"),
            brand=data.get("brand"),
            category=data.get("category"),
            specs=tuple(
                ProductSpec(name=s["name"], value=s["value"])
                for s in data.get("specs", [])
            ),
            rating=ProductRating(
                average=rating.get("average", 0.0),
                count=rating.get("count", 0),
            ),
            upc=data.get("upc"),
            ean=data.get("ean"),
            url=data.get("url", ""),
            image_url=data.get("image_url", ""),
            condition=data.get("condition"),
            availability=data.get("availability"),
            seller=data.get("seller"),
            fetched_at=datetime.fromisoformat(data["fetched_at"]),
        )


@dataclass(frozen=True)
class MatchResult:
    """A candidate from the other platform with its confidence."""

    product: NormalizedProduct
    confidence: float
    match_method: MatchMethod

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible snapshot."""
        return {
            "product": self.product.to_dict(),
            "confidence": self.confidence,
            "match_method": self.match_method.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchResult":
        """Rebuild a match from a :meth:`to_dict` snapshot."""
        return cls(
            product=NormalizedProduct.from_dict(data["product"]),
            confidence=data["confidence"],
            match_method=MatchMethod(data["match_method"]),
        )
