import asyncio

import httpx
import pytest

from coincalc.core.config import Settings
from coincalc.models.rates import RateOutcome
from coincalc.models.valuation import RawInputs
from coincalc.services.http_client import RateFetchError, get_json
from coincalc.services.rates.providers import (
    ExternalHTTPRateProvider,
    StaticRateProvider,
    extract_rate,
    make_rate_provider,
)
from coincalc.services.rates.state_service import RateStateService
from coincalc.services.valuation import evaluate

from .conftest import RATE_URL, http_provider, mock_transport


def run(coro):
    return asyncio.run(coro)


def test_remote_rate_is_adopted():
    calls = []
    provider = http_provider(mock_transport(json_body={"base": "USD", "rates": {"IDR": 16250.5, "EUR": 0.92}}, calls=calls))
    outcome = run(provider.fetch_rate())
    assert outcome == RateOutcome(rate=16250.5, source="remote")
    assert len(calls) == 1
    assert str(calls[0].url) == RATE_URL


@pytest.mark.parametrize(
    "transport",
    [
        mock_transport(exc=httpx.ConnectError("connection refused")),
        mock_transport(exc=httpx.ReadTimeout("timed out")),
        mock_transport(500, {"error": "boom"}),
        mock_transport(404, {"rates": {"IDR": 16000}}),
        mock_transport(text="<html>not json</html>"),
        mock_transport(json_body=["not", "an", "object"]),
        mock_transport(json_body={"result": "success"}),
        mock_transport(json_body={"rates": {"EUR": 0.92}}),
        mock_transport(json_body={"rates": {"IDR": "16000"}}),
        mock_transport(json_body={"rates": {"IDR": 0}}),
        mock_transport(json_body={"rates": {"IDR": -1}}),
        mock_transport(json_body={"rates": {"IDR": True}}),
        mock_transport(json_body={"rates": None}),
    ],
)
def test_failures_fall_back_to_fixed_rate(transport):
    outcome = run(http_provider(transport).fetch_rate())
    assert outcome.source == "fallback"
    assert outcome.rate == 15000
    assert outcome.reason


def test_single_request_per_fetch_even_on_failure():
    calls = []
    provider = http_provider(mock_transport(exc=httpx.ConnectError("down"), calls=calls))
    run(provider.fetch_rate())
    assert len(calls) == 1


def test_get_json_wraps_errors():
    with pytest.raises(RateFetchError):
        run(get_json(RATE_URL, transport=mock_transport(503, {})))


def test_get_json_retries_when_asked():
    calls = []
    transport = mock_transport(exc=httpx.ConnectError("down"), calls=calls)
    with pytest.raises(RateFetchError):
        run(get_json(RATE_URL, retries=2, backoff=0, transport=transport))
    assert len(calls) == 3


def test_extract_rate():
    assert extract_rate({"rates": {"IDR": 15500}}, "IDR") == 15500.0
    assert extract_rate({"rates": {"IDR": 10**400}}, "IDR") is None
    assert extract_rate({}, "IDR") is None


def test_static_provider_never_goes_remote():
    outcome = run(StaticRateProvider(15000.0).fetch_rate())
    assert outcome.source == "fallback"
    assert outcome.rate == 15000


def test_make_rate_provider_follows_settings():
    http = make_rate_provider(Settings(exchange_rate_provider="external-http"))
    assert isinstance(http, ExternalHTTPRateProvider)
    static = make_rate_provider(Settings(exchange_rate_provider="static", fallback_rate=16000))
    assert isinstance(static, StaticRateProvider)
    assert static.fallback_rate == 16000


def test_unknown_provider_rejected_by_settings():
    with pytest.raises(ValueError):
        Settings(exchange_rate_provider="carrier-pigeon")


def test_state_starts_at_fallback_rate():
    svc = RateStateService(StaticRateProvider(15000.0), 15000.0)
    state = svc.snapshot()
    assert state.rate == "15000"
    assert not state.loading
    assert state.error is None


def test_state_takes_remote_rate_and_clears_error():
    replies = [httpx.ConnectError("down"), {"rates": {"IDR": 16250}}]

    def handler(request: httpx.Request) -> httpx.Response:
        reply = replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return httpx.Response(200, json=reply)

    svc = RateStateService(http_provider(httpx.MockTransport(handler)), 15000.0)
    run(svc.refresh())
    assert svc.snapshot().error

    outcome = run(svc.refresh())
    state = svc.snapshot()
    assert outcome.source == "remote"
    assert state.rate == "16250"
    assert state.error is None
    assert state.source == "remote"
    assert not state.loading


def test_failed_fetch_still_allows_valuation():
    svc = RateStateService(http_provider(mock_transport(exc=httpx.ConnectError("down"))), 15000.0)
    outcome = run(svc.refresh())
    state = svc.snapshot()
    assert outcome.source == "fallback"
    assert state.rate == "15000"
    assert state.error == outcome.reason
    assert not state.loading

    result = evaluate(RawInputs(price="0.48", holding="1000", rate=state.rate)).result
    assert result.total_fiat_value == pytest.approx(7_200_000)


def test_loading_flag_is_set_while_fetching():
    seen = []

    class LoadingWatcher(StaticRateProvider):
        async def fetch_rate(self):
            seen.append(svc.snapshot().loading)
            return await super().fetch_rate()

    svc = RateStateService(LoadingWatcher(15000.0), 15000.0)
    run(svc.refresh())
    assert seen == [True]
    assert not svc.loading


def test_provider_crash_resets_loading():
    class Broken(StaticRateProvider):
        async def fetch_rate(self):
            raise RuntimeError("bug")

    svc = RateStateService(Broken(15000.0), 15000.0)
    with pytest.raises(RuntimeError):
        run(svc.refresh())
    assert not svc.loading
    assert svc.snapshot().rate == "15000"


def test_http_retries_setting_reaches_provider():
    calls = []
    transport = mock_transport(exc=httpx.ConnectError("down"), calls=calls)
    settings = Settings(exchange_rate_provider="external-http", http_retries=1)
    provider = make_rate_provider(settings, transport=transport)
    outcome = run(provider.fetch_rate())
    assert outcome.source == "fallback"
    assert len(calls) == 2


def test_negative_retries_rejected_by_settings():
    with pytest.raises(ValueError):
        Settings(http_retries=-1)
