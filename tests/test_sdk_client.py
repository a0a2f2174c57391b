"""
Tests for the requests-based WalletFeed client example (docs/python_sdk_example.py).

requests.Session.request is mocked; no network.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from docs.python_sdk_example import WalletFeedClient, WalletFeedClientError


def _response(status: int, body, headers: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.ok = 200 <= status < 300
    resp.status_code = status
    resp.json.return_value = body
    resp.text = str(body)
    resp.headers = {"content-type": "application/json", **(headers or {})}
    return resp


def test_get_wallet_activity_returns_source():
    client = WalletFeedClient("http://proxy.local/")
    resp = _response(200, [{"signature": "a"}], {"X-Source": "cache"})
    with patch("requests.Session.request", return_value=resp) as req:
        records, source = client.get_wallet_activity("W1", limit=5)
    assert records == [{"signature": "a"}]
    assert source == "cache"
    args, kwargs = req.call_args
    assert args == ("GET", "http://proxy.local/api/helius-fast")
    assert kwargs["params"] == {"wallet": "W1", "limit": 5}


def test_get_mint_born():
    client = WalletFeedClient()
    with patch("requests.Session.request", return_value=_response(200, {"bornTs": 1700000000})):
        assert client.get_mint_born("M") == 1700000000


def test_error_response_raises():
    client = WalletFeedClient()
    resp = _response(400, {"error": "Missing wallet or API key"})
    with patch("requests.Session.request", return_value=resp):
        with pytest.raises(WalletFeedClientError, match="Missing wallet") as exc_info:
            client.get_wallet_history("")
    assert exc_info.value.status_code == 400


def test_notify_swap():
    client = WalletFeedClient()
    with patch("requests.Session.request", return_value=_response(200, {"ok": False, "reason": "x"})) as req:
        assert client.notify_swap({"side": "BUY"}) is False
    assert req.call_args.kwargs["json"] == {"side": "BUY"}
