"""
Shared request helpers for upstream providers.

send() is the strict path: network failure or timeout becomes an UpstreamError
with the synthetic 599 status, and the caller inspects the response status.
try_json() is the best-effort path used by probes: any failure is None.

httpx timeouts bound each connect/read/write step; the whole call, body
included, is additionally bounded by one REQUEST_TIMEOUT deadline.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from backend_walletfeed.core.exceptions import STATUS_UNREACHABLE, UpstreamError
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT = 15.0
# Max characters of an upstream body echoed back in error details
MAX_DETAIL_CHARS = 800


def create_http_client(timeout: float = REQUEST_TIMEOUT, **kwargs: Any) -> httpx.AsyncClient:
    """AsyncClient shared by all upstream clients."""
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout), **kwargs)


def truncate(text: str, limit: int = MAX_DETAIL_CHARS) -> str:
    return text if len(text) <= limit else text[:limit]


async def _request_with_deadline(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> httpx.Response:
    return await asyncio.wait_for(
        client.request(method, url, timeout=REQUEST_TIMEOUT, **kwargs),
        timeout=REQUEST_TIMEOUT,
    )


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    provider: str,
    **kwargs: Any,
) -> httpx.Response:
    """Issue one request. Raises UpstreamError(599) when no full response arrives in time."""
    try:
        return await _request_with_deadline(client, method, url, **kwargs)
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.warning("upstream_timeout", provider=provider, error=str(e) or type(e).__name__)
        raise UpstreamError(
            f"{provider} timed out",
            provider=provider,
            status_code=STATUS_UNREACHABLE,
            details=str(e) or "timeout",
        ) from e
    except httpx.HTTPError as e:
        logger.warning("upstream_unreachable", provider=provider, error=str(e))
        raise UpstreamError(
            f"{provider} unreachable",
            provider=provider,
            status_code=STATUS_UNREACHABLE,
            details=str(e),
        ) from e


def error_details(response: httpx.Response) -> str:
    """Response body, or the reason phrase when the body is empty."""
    text = response.text or ""
    return truncate(text) if text else response.reason_phrase


async def try_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    **kwargs: Any,
) -> Any | None:
    """GET url and decode JSON. None on network error, timeout, non-2xx or invalid JSON."""
    try:
        r = await _request_with_deadline(client, "GET", url, **kwargs)
    except (asyncio.TimeoutError, httpx.HTTPError) as e:
        logger.debug("probe_request_failed", provider=provider, error=str(e) or type(e).__name__)
        return None
    if not r.is_success:
        logger.debug("probe_non_ok", provider=provider, status_code=r.status_code)
        return None
    try:
        return r.json()
    except ValueError:
        logger.debug("probe_invalid_json", provider=provider)
        return None
