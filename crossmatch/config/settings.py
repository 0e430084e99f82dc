# crossmatch/config/settings.py

"""Central configuration for the crossmatch engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class CacheTTL:
    """Cache lifetimes (seconds) per data category."""

    PRODUCT: int = 3600      # 1 hour
    SEARCH: int = 1800       # 30 minutes
    MATCH: int = 7200        # 2 hours
    ADVISORY: int = 86400    # 24 hours


class Settings:
    """Central configuration for the crossmatch engine."""

    # --- Credentials (from environment / .env) ---
    RAINFOREST_API_KEY: str = os.getenv("RAINFOREST_API_KEY", "")
    EBAY_APP_ID: str = os.getenv("EBAY_APP_ID", "")
    EBAY_CERT_ID: str = os.getenv("EBAY_CERT_ID", "")

    # --- HTTP ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Provider endpoints ---
    RAINFOREST_URL: str = "https://api.rainforestapi.com/request"
    AMAZON_DOMAIN: str = "amazon.com"
    EBAY_API_BASE: str = "https://api.ebay.com"
    EBAY_MARKETPLACE_ID: str = "EBAY_US"
    EBAY_OAUTH_SCOPE: str = "https://api.ebay.com/oauth/api_scope"
    EBAY_SEARCH_LIMIT: int = 10
    EBAY_TOKEN_REFRESH_MARGIN: int = 60  # Refresh this many secs early

    # --- Matching ---
    TITLE_WEIGHT: float = 0.5
    BRAND_WEIGHT: float = 0.3
    PRICE_WEIGHT: float = 0.2
    KEYWORD_CONFIDENCE_CAP: float = 0.85
    IDENTIFIER_CONFIDENCE: float = 0.95
    MAX_KEYWORD_MATCHES: int = 5
    QUERY_TITLE_TOKENS: int = 6

    # --- Cache ---
    CACHE_BACKEND: str = os.getenv("CACHE_BACKEND", "memory")
    REDIS_URL: str = os.getenv("REDIS_URL", "")
    CACHE_SWEEP_INTERVAL: float = 300.0  # Memory backend sweep (secs)

    # --- Logging ---
    LOG_CONSOLE_LEVEL: str = os.getenv("CROSSMATCH_LOG_LEVEL", "WARNING")
    # Per-component floor for records reaching the run log file
    LOG_LEVELS: dict[str, str] = {
        "crossmatch.matching": "DEBUG",      # tier decisions, skipped tiers
        "crossmatch.orchestrator": "INFO",
        "crossmatch.cache": "INFO",          # per-key hit/miss is DEBUG
        "crossmatch.providers": "INFO",
        "crossmatch.amazon": "INFO",
        "crossmatch.ebay": "INFO",
        "crossmatch.health": "INFO",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Providers (one per supported platform) ---
    AVAILABLE_PROVIDERS: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon",
            "provider": "crossmatch.providers.amazon_provider.AmazonProvider",
        },
        {
            "id": "ebay",
            "label": "eBay",
            "provider": "crossmatch.providers.ebay_provider.EbayProvider",
        },
    ]
