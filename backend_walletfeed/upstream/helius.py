"""
Helius REST client.

- parse_transactions: batch-parse signatures (fast path, step B).
- address_transactions: indexed history for a wallet (slow path).
- token_metadata: best-effort metadata lookup for a mint.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import httpx

from backend_walletfeed.core.exceptions import MalformedResponse, UpstreamError
from backend_walletfeed.upstream.http import error_details, send, truncate, try_json
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

HELIUS_API_BASE = "https://api.helius.xyz"
PROVIDER = "helius"


def coerce_transaction_list(payload: Any) -> list[Any]:
    """Lenient shape for the slow path: list as-is, {items: [...]} unwrapped, anything else empty."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        items = payload.get("items")
        return items if isinstance(items, list) else []
    return []


class HeliusClient:
    def __init__(self, http: httpx.AsyncClient, api_key: str, base_url: str = HELIUS_API_BASE) -> None:
        self._http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def parse_transactions(self, signatures: list[str]) -> list[Any]:
        """POST signatures to /v0/transactions. Non-array payload is MalformedResponse."""
        r = await send(
            self._http,
            "POST",
            f"{self.base_url}/v0/transactions",
            provider=PROVIDER,
            params={"api-key": self.api_key},
            json={"transactions": signatures},
        )
        if not r.is_success:
            details = error_details(r)
            logger.error("helius_parse_non_ok", status_code=r.status_code, details=details)
            raise UpstreamError("Helius parse failed", provider=PROVIDER, status_code=r.status_code, details=details)
        try:
            parsed = r.json()
        except ValueError as e:
            raise MalformedResponse("Helius parse returned invalid JSON", provider=PROVIDER, details=error_details(r)) from e
        if not isinstance(parsed, list):
            logger.error("helius_parse_not_array", payload=truncate(json.dumps(parsed)))
            raise MalformedResponse("Helius did not return array", provider=PROVIDER, details=parsed)
        return parsed

    async def address_transactions(self, wallet: str, limit: int, *, strict: bool = False) -> list[Any]:
        """
        GET /v0/addresses/{wallet}/transactions.

        strict=False (cooldown / 429 fallback): unparseable body is [], {items} is unwrapped.
        strict=True (direct slow route): invalid JSON or non-array is MalformedResponse.
        """
        r = await send(
            self._http,
            "GET",
            f"{self.base_url}/v0/addresses/{quote(wallet, safe='')}/transactions",
            provider=PROVIDER,
            params={"api-key": self.api_key, "limit": str(limit)},
        )
        text = r.text or ""
        if not r.is_success:
            details = error_details(r)
            logger.warning("helius_slow_non_ok", wallet_id=wallet, status_code=r.status_code, details=details)
            raise UpstreamError("Failed to fetch from Helius", provider=PROVIDER, status_code=r.status_code, details=details)
        try:
            data = json.loads(text)
        except ValueError as e:
            if not strict:
                return []
            logger.error("helius_slow_invalid_json", wallet_id=wallet, body=truncate(text))
            raise MalformedResponse("Invalid JSON from Helius", provider=PROVIDER, details=text[:500]) from e
        if strict:
            if not isinstance(data, list):
                logger.error("helius_slow_not_array", wallet_id=wallet, payload=truncate(json.dumps(data)))
                raise MalformedResponse("Helius did not return an array", provider=PROVIDER, details=data)
            return data
        return coerce_transaction_list(data)

    async def token_metadata(self, mint: str) -> dict[str, Any] | None:
        """Best-effort: first metadata object for mint, or None."""
        payload = await try_json(
            self._http,
            f"{self.base_url}/v0/tokens/metadata",
            provider="helius-metadata",
            params={"mint": mint, "api-key": self.api_key},
        )
        meta = payload[0] if isinstance(payload, list) and payload else payload
        return meta if isinstance(meta, dict) else None
