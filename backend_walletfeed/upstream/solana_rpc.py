"""
Solana JSON-RPC client: getSignaturesForAddress for the fast path.

Rate limits surface as RateLimited (HTTP 429, a non-ok body mentioning 429,
or a JSON-RPC error with code 429); every other failure is an UpstreamError.
"""

from __future__ import annotations

from typing import Any

import httpx

from backend_walletfeed.core.exceptions import (
    STATUS_BAD_GATEWAY,
    MalformedResponse,
    RateLimited,
    UpstreamError,
)
from backend_walletfeed.upstream.http import error_details, send
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

PROVIDER = "solana-rpc"
RATE_LIMIT_CODE = 429


def _is_rate_limit_code(code: Any) -> bool:
    try:
        return int(code) == RATE_LIMIT_CODE
    except (TypeError, ValueError):
        return False


class SolanaRpcClient:
    """Minimal JSON-RPC client bound to one endpoint."""

    def __init__(self, http: httpx.AsyncClient, rpc_url: str) -> None:
        self._http = http
        self.rpc_url = rpc_url

    async def _call(self, method: str, params: list[Any], request_id: str) -> Any:
        body = {"jsonrpc": "2.0", "id": request_id, "method": method, "params": params}
        r = await send(self._http, "POST", self.rpc_url, provider=PROVIDER, json=body)
        if not r.is_success:
            details = error_details(r)
            if r.status_code == RATE_LIMIT_CODE or "429" in (r.text or ""):
                raise RateLimited(PROVIDER, details=details)
            logger.error("rpc_non_ok", method=method, status_code=r.status_code, details=details)
            raise UpstreamError("RPC error", provider=PROVIDER, status_code=r.status_code, details=details)
        try:
            data = r.json()
        except ValueError as e:
            raise MalformedResponse("RPC returned invalid JSON", provider=PROVIDER, details=error_details(r)) from e
        if not isinstance(data, dict):
            raise MalformedResponse("RPC returned unexpected payload", provider=PROVIDER, details=data)
        err = data.get("error")
        if err:
            if isinstance(err, dict) and _is_rate_limit_code(err.get("code")):
                raise RateLimited(PROVIDER, details=err)
            logger.error("rpc_error_field", method=method, error=err)
            raise UpstreamError("RPC error", provider=PROVIDER, status_code=STATUS_BAD_GATEWAY, details=err)
        return data.get("result")

    async def get_signatures_for_address(self, wallet: str, limit: int) -> list[str]:
        """Most-recent-first signatures for wallet, at most `limit`."""
        result = await self._call(
            "getSignaturesForAddress",
            [wallet, {"limit": limit}],
            request_id="getSigs",
        )
        if result is None:
            return []
        if not isinstance(result, list):
            raise MalformedResponse("RPC result is not a list", provider=PROVIDER, details=result)
        return [
            str(row["signature"])
            for row in result
            if isinstance(row, dict) and row.get("signature")
        ]
