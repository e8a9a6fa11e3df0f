from __future__ import annotations

"""Rate provider abstraction.

A provider answers one question: the current USD -> IDR rate. It never raises
for a failed lookup; it returns a fallback ``RateOutcome`` with a reason
instead, so the form stays usable.
"""
from abc import ABC, abstractmethod

from coincalc.models.rates import RateOutcome


class RateProvider(ABC):
    base_currency: str = "USD"

    def __init__(self, fallback_rate: float, quote_currency: str = "IDR"):
        self.fallback_rate = fallback_rate
        self.quote_currency = quote_currency.upper()

    @abstractmethod
    async def fetch_rate(self) -> RateOutcome:
        """Return quote_currency per 1 unit of base_currency."""
        raise NotImplementedError

    def fallback(self, reason: str) -> RateOutcome:
        return RateOutcome(rate=self.fallback_rate, source="fallback", reason=reason)
