# crossmatch/services/health_checker.py

"""Provider configuration and connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from crossmatch.providers.base_provider import BaseProvider
from crossmatch.providers.registry import ProviderRegistry

logger = logging.getLogger("crossmatch.health")

_HEALTH_TIMEOUT = 10  # seconds per provider
_SLOW_THRESHOLD_MS = 5000


@dataclass
class HealthResult:
    """Result of a single provider health check."""

    provider_id: str
    status: str  # "ok", "slow", "unconfigured", "down"
    latency_ms: float
    message: str


def probe_provider(provider: BaseProvider) -> HealthResult:
    """Check that *provider* has credentials and its API host answers.

    Any HTTP response counts as reachable; API endpoints usually reject
    a bare GET, which is fine for a connectivity probe.
    """
    provider_id = provider.platform.value

    if not provider.is_configured():
        return HealthResult(
            provider_id=provider_id,
            status="unconfigured",
            latency_ms=0.0,
            message="Missing credentials",
        )

    start = time.monotonic()
    try:
        resp = provider.session.get(
            provider.get_homepage(),
            timeout=_HEALTH_TIMEOUT,
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code >= 500:
            return HealthResult(
                provider_id=provider_id,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > _SLOW_THRESHOLD_MS:
            return HealthResult(
                provider_id=provider_id,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            provider_id=provider_id,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            provider_id=provider_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent health probes against all providers."""

    def __init__(self, providers: ProviderRegistry | None = None) -> None:
        self.providers = providers or ProviderRegistry.from_settings()

    async def check_all(self) -> list[HealthResult]:
        """Probe every registered provider concurrently."""
        tasks = [
            asyncio.to_thread(probe_provider, provider)
            for provider in self.providers.all()
        ]
        results: list[HealthResult] = list(
            await asyncio.gather(*tasks)
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.provider_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
