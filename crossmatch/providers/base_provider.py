# crossmatch/providers/base_provider.py

"""Abstract base class for all marketplace candidate providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from crossmatch.config.settings import Settings
from crossmatch.models.product import NormalizedProduct, Platform


class ProviderError(Exception):
    """A provider call failed (network error or non-success response)."""


class ProviderNotConfiguredError(ProviderError):
    """The provider is missing the credentials it needs."""


class BaseProvider(ABC):
    """Abstract base class for all marketplace providers.

    Every request is single-shot: a transport error or a non-200
    response raises :class:`ProviderError` and it is up to the caller
    (the matching tiers) to decide how to degrade.
    """

    platform: Platform

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"crossmatch.{source_name}"
        )
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = (
            self.settings.REQUEST_TIMEOUT
        )

    def _check_response(
        self, resp: curl_requests.Response, url: str,
    ) -> dict[str, Any]:
        """Raise on a non-200 response, otherwise decode the JSON body."""
        if resp.status_code != 200:
            self.logger.warning(
                "[%s] HTTP %d from %s",
                self.source_name,
                resp.status_code,
                url,
            )
            raise ProviderError(
                f"{self.source_name} returned HTTP {resp.status_code}"
            )
        try:
            body: Any = resp.json()
        except ValueError as exc:
            raise ProviderError(
                f"{self.source_name} returned a non-JSON body"
            ) from exc
        if not isinstance(body, dict):
            raise ProviderError(
                f"{self.source_name} returned an unexpected payload"
            )
        return body

    def _fetch_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Single GET returning the decoded JSON body."""
        try:
            resp = self.session.get(
                url,
                params=params,
                headers={
                    **self.settings.DEFAULT_HEADERS,
                    **(headers or {}),
                },
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request error for %s: %s",
                self.source_name,
                url,
                exc,
            )
            raise ProviderError(
                f"{self.source_name} request failed: {exc}"
            ) from exc
        return self._check_response(resp, url)

    def _fetch_post(
        self,
        url: str,
        data: dict[str, str],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Single form-encoded POST returning the decoded JSON body."""
        try:
            resp = self.session.post(
                url,
                data=data,
                headers=headers or {},
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request error for %s: %s",
                self.source_name,
                url,
                exc,
            )
            raise ProviderError(
                f"{self.source_name} request failed: {exc}"
            ) from exc
        return self._check_response(resp, url)

    @abstractmethod
    def get_homepage(self) -> str:
        """Return a URL that is cheap to probe for reachability."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when the provider has the credentials it needs."""
        ...

    @abstractmethod
    def search_by_query(self, query: str) -> list[NormalizedProduct]:
        """Keyword search returning normalized candidates."""
        ...

    @abstractmethod
    def search_by_identifier(
        self, identifier: str,
    ) -> list[NormalizedProduct]:
        """UPC/EAN lookup returning normalized candidates."""
        ...

    @abstractmethod
    def fetch_product(self, platform_id: str) -> NormalizedProduct:
        """Fetch the full detail record for one listing."""
        ...
