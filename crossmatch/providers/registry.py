# crossmatch/providers/registry.py

"""Platform-keyed access to the marketplace providers."""

import importlib
import logging
from typing import Any

from crossmatch.config.settings import Settings
from crossmatch.models.product import NormalizedProduct, Platform
from crossmatch.providers.base_provider import (
    BaseProvider,
    ProviderNotConfiguredError,
)

logger = logging.getLogger("crossmatch.providers")


def _load_provider_class(dotted_path: str) -> type[Any]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class ProviderRegistry:
    """Uniform search interface over one provider per platform.

    Callers check :meth:`is_configured` first; an unconfigured or
    unregistered platform simply has no candidates.
    """

    def __init__(
        self,
        providers: dict[Platform, BaseProvider] | None = None,
    ) -> None:
        self._providers: dict[Platform, BaseProvider] = dict(
            providers or {}
        )

    @classmethod
    def from_settings(cls) -> "ProviderRegistry":
        """Instantiate every provider listed in AVAILABLE_PROVIDERS."""
        providers: dict[Platform, BaseProvider] = {}
        for entry in Settings.AVAILABLE_PROVIDERS:
            provider_cls = _load_provider_class(entry["provider"])
            providers[Platform(entry["id"])] = provider_cls()
        return cls(providers)

    def get(self, platform: Platform) -> BaseProvider | None:
        """Return the provider for *platform*, if one is registered."""
        return self._providers.get(platform)

    def all(self) -> list[BaseProvider]:
        """Every registered provider, configured or not."""
        return list(self._providers.values())

    def is_configured(self, platform: Platform) -> bool:
        """True when *platform* has a provider with credentials."""
        provider = self._providers.get(platform)
        return provider is not None and provider.is_configured()

    def _require(self, platform: Platform) -> BaseProvider:
        provider = self._providers.get(platform)
        if provider is None or not provider.is_configured():
            raise ProviderNotConfiguredError(
                f"No configured provider for {platform.value}"
            )
        return provider

    def search_by_query(
        self, query: str, platform: Platform,
    ) -> list[NormalizedProduct]:
        """Keyword search on *platform*."""
        return self._require(platform).search_by_query(query)

    def search_by_identifier(
        self, identifier: str, platform: Platform,
    ) -> list[NormalizedProduct]:
        """UPC/EAN lookup on *platform*."""
        return self._require(platform).search_by_identifier(identifier)

    def fetch_product(
        self, platform_id: str, platform: Platform,
    ) -> NormalizedProduct:
        """Detail lookup for one listing on *platform*."""
        return self._require(platform).fetch_product(platform_id)
