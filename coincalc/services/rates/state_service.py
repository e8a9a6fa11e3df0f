from __future__ import annotations

import logging
from typing import Optional

from coincalc.core.config import Settings
from coincalc.models.rates import RateOutcome, RateState
from coincalc.services.money import format_rate
from .base import RateProvider
from .providers import make_rate_provider

"""Application-wide rate state (one instance per app, kept on app.state).

Purpose:
    Hold the rate text the form starts from, whether a fetch is running, and
    the advisory from the last failed fetch.

Design:
    - Wraps one RateProvider chosen by settings.exchange_rate_provider.
    - Every change replaces the whole (frozen) RateState; readers only ever see
      a complete snapshot.
    - refresh() never raises; a failed fetch stores the fallback rate and the
      provider's reason as ``error``.
    - Overlapping refreshes are prevented by callers checking ``loading``.
"""

logger = logging.getLogger("coincalc.rates")


class RateStateService:
    def __init__(self, provider: RateProvider, initial_rate: float):
        self._provider = provider
        self._state = RateState(rate=format_rate(initial_rate))

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateStateService":
        return cls(make_rate_provider(settings), settings.fallback_rate)

    @property
    def provider(self) -> RateProvider:
        return self._provider

    def snapshot(self) -> RateState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state.loading

    async def refresh(self) -> RateOutcome:
        self._state = self._state.model_copy(update={"loading": True})
        outcome: Optional[RateOutcome] = None
        try:
            outcome = await self._provider.fetch_rate()
        finally:
            if outcome is None:
                # provider raised despite its contract; keep the old rate
                self._state = self._state.model_copy(update={"loading": False})
        self._state = RateState(
            rate=format_rate(outcome.rate),
            loading=False,
            error=outcome.reason if outcome.source == "fallback" else None,
            source=outcome.source,
        )
        logger.debug(
            "rate state replaced",
            extra={"rate": self._state.rate, "rate_source": outcome.source},
        )
        return outcome
