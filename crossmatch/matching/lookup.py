# crossmatch/matching/lookup.py

"""Outcome of a single tier's provider call."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from crossmatch.models.product import NormalizedProduct, Platform
from crossmatch.providers.base_provider import ProviderError
from crossmatch.providers.registry import ProviderRegistry

logger = logging.getLogger("crossmatch.matching")


class LookupStatus(Enum):
    """Why a lookup produced the candidates it did."""

    OK = "ok"
    EMPTY = "empty"
    UNCONFIGURED = "unconfigured"
    FAILED = "failed"


@dataclass(frozen=True)
class LookupOutcome:
    """Candidates from one provider call plus how the call went.

    ``UNCONFIGURED`` and ``FAILED`` always carry no candidates; callers
    that only need the list can use :attr:`candidates` directly.
    """

    status: LookupStatus
    candidates: tuple[NormalizedProduct, ...] = ()
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """True for OK and EMPTY (the provider answered)."""
        return self.status in (LookupStatus.OK, LookupStatus.EMPTY)


def lookup_candidates(
    providers: ProviderRegistry,
    platform: Platform,
    call: Callable[[], list[NormalizedProduct]],
    label: str,
) -> LookupOutcome:
    """Run *call* against *platform*, degrading every provider failure.

    Only :class:`ProviderError` is absorbed; anything else is a bug and
    propagates.
    """
    if not providers.is_configured(platform):
        logger.info(
            "%s skipped: %s provider not configured",
            label,
            platform.value,
        )
        return LookupOutcome(status=LookupStatus.UNCONFIGURED)

    try:
        candidates = call()
    except ProviderError as exc:
        logger.warning(
            "%s failed on %s: %s",
            label,
            platform.value,
            exc,
            exc_info=True,
        )
        return LookupOutcome(
            status=LookupStatus.FAILED, error=str(exc)
        )

    if not candidates:
        return LookupOutcome(status=LookupStatus.EMPTY)
    return LookupOutcome(
        status=LookupStatus.OK, candidates=tuple(candidates)
    )
