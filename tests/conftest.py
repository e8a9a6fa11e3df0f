from typing import Any, Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from coincalc.core.config import Settings
from coincalc.main import create_app
from coincalc.services.rates.providers import ExternalHTTPRateProvider
from coincalc.services.rates.state_service import RateStateService

RATE_URL = "https://rates.test/v4/latest/USD"


def mock_transport(
    status_code: int = 200,
    json_body: Any = None,
    *,
    text: Optional[str] = None,
    exc: Optional[Exception] = None,
    calls: Optional[list] = None,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if exc is not None:
            raise exc
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=json_body)

    return httpx.MockTransport(handler)


def http_provider(transport: httpx.MockTransport) -> ExternalHTTPRateProvider:
    return ExternalHTTPRateProvider(15000.0, "IDR", url=RATE_URL, transport=transport)


@pytest.fixture()
def settings() -> Settings:
    return Settings(exchange_rate_provider="static", fetch_rate_on_startup=False)


@pytest.fixture()
def make_client(settings) -> Callable[..., TestClient]:
    clients = []

    def factory(
        transport: Optional[httpx.MockTransport] = None,
        rate_state: Optional[RateStateService] = None,
        **overrides: Any,
    ) -> TestClient:
        s = settings.model_copy(update=overrides) if overrides else settings
        if rate_state is None and transport is not None:
            rate_state = RateStateService(http_provider(transport), s.fallback_rate)
        client = TestClient(create_app(settings_override=s, rate_state=rate_state))
        client.__enter__()
        clients.append(client)
        return client

    yield factory
    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()
