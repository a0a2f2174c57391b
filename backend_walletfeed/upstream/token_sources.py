"""
Public token-metadata sources (no API key): Jupiter token list, SolanaFM,
Birdeye and the static Solana Labs token list.

All lookups are best-effort and return the provider's raw token object, or
None when the provider fails or does not know the mint.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from backend_walletfeed.upstream.http import try_json

JUPITER_TOKEN_LIST_URL = "https://token.jup.ag/all"
SOLANAFM_TOKEN_URL = "https://api.solana.fm/v0/tokens/{mint}"
BIRDEYE_TOKEN_URL = "https://public-api.birdeye.so/public/token/{mint}"
SOLANA_TOKEN_LIST_URL = (
    "https://raw.githubusercontent.com/solana-labs/token-list/main/src/tokens/solana.tokenlist.json"
)


def _find_by_address(tokens: Any, mint: str) -> dict[str, Any] | None:
    if not isinstance(tokens, list):
        return None
    for token in tokens:
        if isinstance(token, dict) and token.get("address") == mint:
            return token
    return None


async def fetch_jupiter_token(http: httpx.AsyncClient, mint: str) -> dict[str, Any] | None:
    tokens = await try_json(http, JUPITER_TOKEN_LIST_URL, provider="jupiter")
    return _find_by_address(tokens, mint)


async def fetch_solanafm_token(http: httpx.AsyncClient, mint: str) -> dict[str, Any] | None:
    payload = await try_json(
        http,
        SOLANAFM_TOKEN_URL.format(mint=quote(mint, safe="")),
        provider="solanafm",
        headers={"accept": "application/json"},
    )
    result = payload.get("result") if isinstance(payload, dict) else None
    return result if isinstance(result, dict) else None


async def fetch_birdeye_token(http: httpx.AsyncClient, mint: str) -> dict[str, Any] | None:
    payload = await try_json(http, BIRDEYE_TOKEN_URL.format(mint=quote(mint, safe="")), provider="birdeye")
    data = payload.get("data") if isinstance(payload, dict) else None
    return data if isinstance(data, dict) else None


async def fetch_token_list_entry(http: httpx.AsyncClient, mint: str) -> dict[str, Any] | None:
    payload = await try_json(http, SOLANA_TOKEN_LIST_URL, provider="solana-token-list")
    tokens = payload.get("tokens") if isinstance(payload, dict) else None
    return _find_by_address(tokens, mint)
