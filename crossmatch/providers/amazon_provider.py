# crossmatch/providers/amazon_provider.py

"""Amazon.com candidate provider backed by the Rainforest product API."""

import re
from typing import Any

from pydantic import ValidationError

from crossmatch.models.product import (
    NormalizedProduct,
    Platform,
    ProductRating,
    ProductSpec,
)
from crossmatch.providers.base_provider import (
    BaseProvider,
    ProviderError,
    ProviderNotConfiguredError,
)
from crossmatch.providers.schemas import (
    RainforestNamed,
    RainforestProduct,
    RainforestSearchItem,
    validate_items,
)


def _find_attribute(
    attributes: list[RainforestNamed], marker: str,
) -> str | None:
    """Return the first attribute value whose name has *marker* as a word.

    "UPC" and "EAN Code" match "upc" and "ean"; "Cleaning Method" does not.
    """
    pattern = re.compile(rf"\b{re.escape(marker)}\b", re.IGNORECASE)
    for attr in attributes:
        if attr.name and pattern.search(attr.name) and attr.value:
            return attr.value.strip()
    return None


def normalize_amazon_search_item(
    item: RainforestSearchItem,
) -> NormalizedProduct | None:
    """Map one Rainforest search hit to a NormalizedProduct.

    Hits without an ASIN cannot be traced back to a listing and are
    dropped (``None``).
    """
    if not item.asin:
        return None
    price = item.price.value if item.price and item.price.value else 0.0
    return NormalizedProduct(
        platform=Platform.AMAZON,
        platform_id=item.asin,
        title=item.title or "Unknown",
        price=max(price, 0.0),
        currency=(item.price.currency if item.price else None) or "USD",
        brand=item.brand or None,
        rating=ProductRating(
            average=item.rating or 0.0,
            count=item.ratings_total or 0,
        ),
        url=item.link or f"https://www.amazon.com/dp/{item.asin}",
        image_url=item.image or "",
    )


def normalize_amazon_product(
    product: RainforestProduct,
) -> NormalizedProduct | None:
    """Map a Rainforest product-detail record to a NormalizedProduct."""
    if not product.asin:
        return None

    buybox = product.buybox_winner
    price_block = (
        buybox.price if buybox and buybox.price and buybox.price.value
        else product.price
    )
    price = price_block.value if price_block and price_block.value else 0.0
    currency = (price_block.currency if price_block else None) or "USD"

    image_url = ""
    if product.main_image and product.main_image.link:
        image_url = product.main_image.link
    elif product.images and product.images[0].link:
        image_url = product.images[0].link

    return NormalizedProduct(
        platform=Platform.AMAZON,
        platform_id=product.asin,
        title=product.title or "Unknown Product",
        price=max(price, 0.0),
        currency=currency,
        shipping_cost=(
            buybox.shipping.value
            if buybox and buybox.shipping
            else None
        ),
        list_price=(
            product.list_price.value if product.list_price else None
        ),
        brand=product.brand or None,
        category=(
            product.categories[0].name if product.categories else None
        ),
        specs=tuple(
            ProductSpec(name=s.name or "", value=s.value or "")
            for s in product.specifications
        ),
        rating=ProductRating(
            average=product.rating or 0.0,
            count=product.ratings_total or 0,
        ),
        upc=_find_attribute(product.attributes, "upc"),
        ean=_find_attribute(product.attributes, "ean"),
        url=product.link or f"https://www.amazon.com/dp/{product.asin}",
        image_url=image_url,
        condition="New",
        availability=(
            buybox.availability.raw
            if buybox and buybox.availability
            else None
        ),
        seller=(
            buybox.fulfillment.type
            if buybox and buybox.fulfillment
            else None
        ),
    )


class AmazonProvider(BaseProvider):
    """Amazon.com provider (Rainforest API)."""

    platform = Platform.AMAZON

    def __init__(self, api_key: str | None = None) -> None:
        super().__init__("amazon")
        self.api_key = (
            self.settings.RAINFOREST_API_KEY
            if api_key is None
            else api_key
        )

    def get_homepage(self) -> str:
        """Return the Rainforest API endpoint."""
        return self.settings.RAINFOREST_URL

    def is_configured(self) -> bool:
        """True when a Rainforest API key is set."""
        return bool(self.api_key)

    def _request(self, params: dict[str, str]) -> dict[str, Any]:
        if not self.is_configured():
            raise ProviderNotConfiguredError(
                "RAINFOREST_API_KEY is not set"
            )
        return self._fetch_get(
            self.settings.RAINFOREST_URL,
            params={
                "api_key": self.api_key,
                "amazon_domain": self.settings.AMAZON_DOMAIN,
                **params,
            },
        )

    def _search(self, search_term: str) -> list[NormalizedProduct]:
        body = self._request(
            {"type": "search", "search_term": search_term}
        )
        items = validate_items(
            RainforestSearchItem, body.get("search_results")
        )
        products = [
            p
            for p in (normalize_amazon_search_item(i) for i in items)
            if p is not None
        ]
        self.logger.info(
            "[amazon] %d candidates for '%s'",
            len(products),
            search_term,
        )
        return products

    def search_by_query(self, query: str) -> list[NormalizedProduct]:
        """Keyword search on amazon.com."""
        return self._search(query)

    def search_by_identifier(
        self, identifier: str,
    ) -> list[NormalizedProduct]:
        """Rainforest has no GTIN filter; the code is sent as the search term."""
        return self._search(identifier)

    def fetch_product(self, platform_id: str) -> NormalizedProduct:
        """Fetch the detail record for an ASIN."""
        body = self._request({"type": "product", "asin": platform_id})
        try:
            raw = RainforestProduct.model_validate(
                body.get("product") or {}
            )
        except ValidationError as exc:
            raise ProviderError(
                f"Malformed Amazon product {platform_id}"
            ) from exc
        product = normalize_amazon_product(raw)
        if product is None:
            raise ProviderError(
                f"Failed to normalize Amazon product {platform_id}"
            )
        return product
