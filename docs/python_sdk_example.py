"""
WalletFeed API Python client example.

Uses the requests library. Mirrors the routes in backend_walletfeed.api_server.server.

Usage:
    from docs.python_sdk_example import WalletFeedClient
    client = WalletFeedClient("http://localhost:5050")
    records, source = client.get_wallet_activity("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU", limit=10)
"""

from __future__ import annotations

from typing import Any

import requests


class WalletFeedClientError(Exception):
    """Raised when the API returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, response: requests.Response | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class WalletFeedClient:
    """Client for the WalletFeed proxy API."""

    def __init__(self, base_url: str = "http://localhost:5050", timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        resp = self._session.request(method, url, params=params, json=json, timeout=self.timeout)
        if not resp.ok:
            if resp.headers.get("content-type", "").startswith("application/json"):
                body = resp.json()
                detail = body.get("details") or body.get("error") or resp.text
            else:
                detail = resp.text
            raise WalletFeedClientError(
                f"API error: {detail}",
                status_code=resp.status_code,
                response=resp,
            )
        return resp

    def health(self) -> dict[str, Any]:
        r = self._request("GET", "/api/health")
        return r.json()

    def get_wallet_activity(self, wallet: str, limit: int | None = None) -> tuple[list[dict[str, Any]], str]:
        """Freshest transactions and the X-Source tag (cache, fast-rpc+parse, slow-fallback-429, ...)."""
        params: dict[str, Any] = {"wallet": wallet}
        if limit is not None:
            params["limit"] = limit
        r = self._request("GET", "/api/helius-fast", params=params)
        return r.json(), r.headers.get("X-Source", "")

    def get_wallet_history(self, wallet: str, limit: int | None = None) -> list[dict[str, Any]]:
        """Slow indexer only (no cache)."""
        params: dict[str, Any] = {"wallet": wallet}
        if limit is not None:
            params["limit"] = limit
        r = self._request("GET", "/api/helius", params=params)
        return r.json()

    def get_token_metadata(self, mint: str) -> dict[str, str]:
        r = self._request("GET", "/api/token-metadata", params={"mint": mint})
        return r.json()

    def get_mint_born(self, mint: str) -> float | None:
        r = self._request("GET", "/api/mint-born", params={"mint": mint})
        return r.json().get("bornTs")

    def notify_swap(self, event: dict[str, Any]) -> bool:
        r = self._request("POST", "/api/notify-swap", json=event)
        return bool(r.json().get("ok"))

    def notify_buy(self, event: dict[str, Any]) -> bool:
        r = self._request("POST", "/api/notify-buy", json=event)
        return bool(r.json().get("ok"))


# -----------------------------------------------------------------------------
# Example usage
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    client = WalletFeedClient("http://localhost:5050")

    print("Health:", client.health())

    records, source = client.get_wallet_activity("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU", limit=5)
    print("Activity:", len(records), "records via", source)

    meta = client.get_token_metadata("So11111111111111111111111111111111111111112")
    print("Token:", meta.get("symbol"), meta.get("name"))

    print("Born:", client.get_mint_born("So11111111111111111111111111111111111111112"))
