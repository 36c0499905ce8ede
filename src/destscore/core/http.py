"""
Outbound HTTP for remote catalog sources.

`destscore catalog-import https://...` fetches a JSON array of destination rows.
Only GET + JSON decoding is needed; non-2xx responses raise `httpx.HTTPStatusError`
and are left to the caller.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "destscore/0.1.0"


def is_http_url(value: str) -> bool:
    return value.strip().lower().startswith(("http://", "https://"))


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15.0,
    transport: httpx.BaseTransport | None = None,
) -> Any:
    """Fetch `url` and decode the JSON body.

    `transport` lets tests swap in `httpx.MockTransport`.
    """
    with httpx.Client(
        timeout=timeout_seconds,
        headers={"User-Agent": USER_AGENT, **(headers or {})},
        follow_redirects=True,
        transport=transport,
    ) as client:
        resp = client.get(url, params=params)
        logger.info("GET %s -> %d", resp.request.url, resp.status_code)
        resp.raise_for_status()
        return resp.json()
