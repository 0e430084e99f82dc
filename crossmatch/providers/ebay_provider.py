# crossmatch/providers/ebay_provider.py

"""eBay US candidate provider backed by the Browse API."""

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
from crossmatch.providers.ebay_auth import EbayTokenClient
from crossmatch.providers.schemas import (
    EbayAmount,
    EbayItem,
    EbayItemSummary,
    EbayShippingOption,
    validate_items,
)


def _parse_amount(amount: EbayAmount | None) -> float | None:
    """eBay sends money as strings; unparseable values become None."""
    if amount is None or not amount.value:
        return None
    try:
        return float(amount.value)
    except ValueError:
        return None


def _shipping_cost(options: list[EbayShippingOption]) -> float | None:
    if not options:
        return None
    return _parse_amount(options[0].shippingCost)


def normalize_ebay_summary(
    item: EbayItemSummary,
) -> NormalizedProduct | None:
    """Map one search summary to a NormalizedProduct (None without itemId)."""
    if not item.itemId:
        return None
    return NormalizedProduct(
        platform=Platform.EBAY,
        platform_id=item.itemId,
        title=item.title or "Unknown",
        price=max(_parse_amount(item.price) or 0.0, 0.0),
        currency=(item.price.currency if item.price else None) or "USD",
        shipping_cost=_shipping_cost(item.shippingOptions),
        url=item.itemWebUrl or "",
        image_url=(item.image.imageUrl or "") if item.image else "",
        condition=item.condition,
        seller=(
            (item.seller.username or "Unknown") if item.seller else None
        ),
    )


def normalize_ebay_item(item: EbayItem) -> NormalizedProduct | None:
    """Map a full item-detail record to a NormalizedProduct."""
    if not item.itemId:
        return None

    brand = item.brand
    if not brand:
        brand = next(
            (
                a.value
                for a in item.localizedAspects
                if a.name == "Brand" and a.value
            ),
            None,
        )

    review = item.primaryProductReviewRating
    average = 0.0
    if review and review.averageRating:
        try:
            average = float(review.averageRating)
        except ValueError:
            average = 0.0

    return NormalizedProduct(
        platform=Platform.EBAY,
        platform_id=item.itemId,
        title=item.title or "Unknown Product",
        price=max(_parse_amount(item.price) or 0.0, 0.0),
        currency=(item.price.currency if item.price else None) or "USD",
        shipping_cost=_shipping_cost(item.shippingOptions),
        brand=brand,
        category=item.categoryPath,
        specs=tuple(
            ProductSpec(name=a.name or "", value=a.value or "")
            for a in item.localizedAspects
        ),
        rating=ProductRating(
            average=average,
            count=(review.reviewCount or 0) if review else 0,
        ),
        upc=item.gtin,
        url=item.itemWebUrl or "",
        image_url=(item.image.imageUrl or "") if item.image else "",
        condition=item.condition,
        availability=(
            item.estimatedAvailabilities[0].estimatedAvailabilityStatus
            if item.estimatedAvailabilities
            else None
        ),
        seller=(
            (item.seller.username or "Unknown") if item.seller else None
        ),
    )


class EbayProvider(BaseProvider):
    """eBay provider (Browse API, EBAY_US marketplace)."""

    platform = Platform.EBAY

    def __init__(
        self, token_client: EbayTokenClient | None = None,
    ) -> None:
        super().__init__("ebay")
        self.token_client = token_client or EbayTokenClient(
            session=self.session
        )

    def get_homepage(self) -> str:
        """Return the Browse API base URL."""
        return self.settings.EBAY_API_BASE

    def is_configured(self) -> bool:
        """True when the token client has application credentials."""
        return self.token_client.is_configured

    def _headers(self) -> dict[str, str]:
        if not self.is_configured():
            raise ProviderNotConfiguredError(
                "eBay credentials not set"
            )
        return {
            "Authorization": f"Bearer {self.token_client.get_token()}",
            "X-EBAY-C-MARKETPLACE-ID": self.settings.EBAY_MARKETPLACE_ID,
        }

    def _search(self, params: dict[str, str]) -> list[NormalizedProduct]:
        body = self._fetch_get(
            f"{self.settings.EBAY_API_BASE}"
            "/buy/browse/v1/item_summary/search",
            params={
                "limit": str(self.settings.EBAY_SEARCH_LIMIT),
                **params,
            },
            headers=self._headers(),
        )
        items = validate_items(
            EbayItemSummary, body.get("itemSummaries")
        )
        products = [
            p
            for p in (normalize_ebay_summary(i) for i in items)
            if p is not None
        ]
        self.logger.info(
            "[ebay] %d candidates for %s", len(products), params
        )
        return products

    def search_by_query(self, query: str) -> list[NormalizedProduct]:
        """Keyword search on eBay."""
        return self._search({"q": query})

    def search_by_identifier(
        self, identifier: str,
    ) -> list[NormalizedProduct]:
        """GTIN-filtered search on eBay."""
        return self._search({"gtin": identifier})

    def fetch_product(self, platform_id: str) -> NormalizedProduct:
        """Fetch an item by legacy id, falling back to the raw id form."""
        base = f"{self.settings.EBAY_API_BASE}/buy/browse/v1/item"
        headers = self._headers()
        try:
            body = self._fetch_get(
                f"{base}/v1|{platform_id}|0", headers=headers
            )
        except ProviderError:
            self.logger.info(
                "[ebay] v1 item id lookup failed for %s, trying raw id form",
                platform_id,
            )
            body = self._fetch_get(f"{base}/{platform_id}", headers=headers)

        try:
            raw = EbayItem.model_validate(body)
        except ValidationError as exc:
            raise ProviderError(
                f"Malformed eBay item {platform_id}"
            ) from exc
        product = normalize_ebay_item(raw)
        if product is None:
            raise ProviderError(
                f"Failed to normalize eBay item {platform_id}"
            )
        return product
