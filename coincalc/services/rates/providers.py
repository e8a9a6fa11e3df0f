from __future__ import annotations

"""Concrete rate providers and factory.

'external-http' asks a public rates endpoint (no key required) for the latest
USD quotes and reads ``rates[IDR]``. 'static' never touches the network and
always answers the fallback rate, which is handy offline and in tests.
"""
import logging
import math
from typing import Any, Dict, Optional, Type

import httpx

from coincalc.core.config import Settings
from coincalc.models.rates import RateOutcome
from coincalc.services.http_client import RateFetchError, get_json
from .base import RateProvider

logger = logging.getLogger("coincalc.rates")


class StaticRateProvider(RateProvider):
    async def fetch_rate(self) -> RateOutcome:  # type: ignore[override]
        return self.fallback("live rate disabled; using the fixed rate")


def extract_rate(payload: Dict[str, Any], currency: str) -> Optional[float]:
    """Pull a usable rate for ``currency`` out of a ``{"rates": {...}}`` payload."""
    rates = payload.get("rates")
    if not isinstance(rates, dict):
        return None
    value = rates.get(currency)
    # bool is an int subclass; a JSON true is not a rate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class ExternalHTTPRateProvider(RateProvider):
    def __init__(
        self,
        fallback_rate: float,
        quote_currency: str = "IDR",
        *,
        url: str,
        timeout: float = 5.0,
        retries: int = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(fallback_rate, quote_currency)
        self._url = url
        self._timeout = timeout
        self._retries = retries
        self._transport = transport

    async def fetch_rate(self) -> RateOutcome:  # type: ignore[override]
        try:
            data = await get_json(
                self._url,
                timeout=self._timeout,
                retries=self._retries,
                transport=self._transport,
            )
        except RateFetchError as e:
            logger.warning("rate fetch failed: %s", e, extra={"rate_source": "fallback"})
            return self.fallback(
                f"Could not load the live {self.base_currency} to {self.quote_currency} rate; "
                f"using {self.fallback_rate:g} instead."
            )
        rate = extract_rate(data, self.quote_currency)
        if rate is None:
            logger.warning(
                "rate payload has no usable %s entry", self.quote_currency,
                extra={"rate_source": "fallback"},
            )
            return self.fallback(
                f"The rate service returned no usable {self.quote_currency} figure; "
                f"using {self.fallback_rate:g} instead."
            )
        logger.info("rate fetched", extra={"rate": rate, "rate_source": "remote"})
        return RateOutcome(rate=rate, source="remote")


_PROVIDER_REGISTRY: Dict[str, Type[RateProvider]] = {
    "static": StaticRateProvider,
    "external-http": ExternalHTTPRateProvider,
}


def make_rate_provider(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> RateProvider:
    kind = settings.exchange_rate_provider
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    if cls is ExternalHTTPRateProvider:
        return ExternalHTTPRateProvider(
            settings.fallback_rate,
            settings.quote_currency,
            url=str(settings.exchange_api_url),
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
            transport=transport,
        )
    return cls(settings.fallback_rate, settings.quote_currency)
