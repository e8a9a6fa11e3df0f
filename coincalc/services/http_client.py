from __future__ import annotations

"""Small async HTTP helper for JSON GETs.

Every failure mode (transport, timeout, HTTP status >= 400, body that is not a
JSON object) is folded into ``RateFetchError`` so callers handle one type.
Retries default to zero: one request per call.
"""
import asyncio
from typing import Any, Dict, Optional

import httpx


class RateFetchError(Exception):
    pass


async def get_json(
    url: str,
    *,
    timeout: float = 5.0,
    retries: int = 0,
    backoff: float = 0.5,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        for attempt in range(retries + 1):
            try:
                resp = await client.get(url, headers={"Accept": "application/json"})
                if resp.status_code >= 400:
                    raise RateFetchError(f"HTTP {resp.status_code} for {url}")
                data = resp.json()
                if not isinstance(data, dict):
                    raise RateFetchError("response body is not a JSON object")
                return data
            except (httpx.HTTPError, RateFetchError, ValueError) as e:  # ValueError for JSON decode
                last_err = e
                if attempt == retries:
                    break
                await asyncio.sleep(backoff * (2**attempt))
    raise RateFetchError(f"Failed to fetch JSON from {url}: {last_err}") from last_err
