# crossmatch/providers/ebay_auth.py

"""OAuth client-credentials token client for the eBay Browse API."""

import base64
import logging
import threading
import time

from curl_cffi import requests as curl_requests
from pydantic import ValidationError

from crossmatch.config.settings import Settings
from crossmatch.providers.base_provider import (
    ProviderError,
    ProviderNotConfiguredError,
)
from crossmatch.providers.schemas import EbayTokenResponse

logger = logging.getLogger("crossmatch.ebay")


class EbayTokenClient:
    """Issues application access tokens and reuses them until near expiry.

    Constructed explicitly and handed to :class:`EbayProvider`, so tests
    can pass a stub instead of patching module state.
    """

    def __init__(
        self,
        app_id: str | None = None,
        cert_id: str | None = None,
        session: curl_requests.Session | None = None,
        clock=time.monotonic,
    ) -> None:
        self.app_id = (
            Settings.EBAY_APP_ID if app_id is None else app_id
        )
        self.cert_id = (
            Settings.EBAY_CERT_ID if cert_id is None else cert_id
        )
        self.session = session or curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        )
        self._clock = clock
        self._lock = threading.Lock()
        self._token: str | None = None
        self._expires_at: float = 0.0

    @property
    def is_configured(self) -> bool:
        """True when both application credentials are present."""
        return bool(self.app_id and self.cert_id)

    def get_token(self) -> str:
        """Return a valid access token, refreshing it if needed."""
        with self._lock:
            if self._token and self._clock() < self._expires_at:
                return self._token
            return self._refresh()

    def invalidate(self) -> None:
        """Forget the cached token so the next call refreshes."""
        with self._lock:
            self._token = None
            self._expires_at = 0.0

    def _refresh(self) -> str:
        if not self.is_configured:
            raise ProviderNotConfiguredError(
                "eBay credentials not set"
            )

        credentials = base64.b64encode(
            f"{self.app_id}:{self.cert_id}".encode()
        ).decode()
        url = f"{Settings.EBAY_API_BASE}/identity/v1/oauth2/token"
        try:
            resp = self.session.post(
                url,
                data={
                    "grant_type": "client_credentials",
                    "scope": Settings.EBAY_OAUTH_SCOPE,
                },
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Authorization": f"Basic {credentials}",
                },
                timeout=Settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise ProviderError(f"eBay auth request failed: {exc}") from exc

        if resp.status_code != 200:
            raise ProviderError(f"eBay auth error: HTTP {resp.status_code}")

        try:
            payload = EbayTokenResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ProviderError("eBay auth returned a malformed token") from exc

        self._token = payload.access_token
        self._expires_at = self._clock() + max(
            payload.expires_in - Settings.EBAY_TOKEN_REFRESH_MARGIN, 0
        )
        logger.debug(
            "Refreshed eBay token (valid for %ds)", payload.expires_in
        )
        return self._token
