"""
Tests for the FastAPI surface: routes, X-Source header, error mapping, CORS.

Uses fastapi TestClient over an app built with create_app() and a fake upstream.
"""

from __future__ import annotations

from dataclasses import replace

from tests.conftest import (
    HELIUS_METADATA_URL,
    HELIUS_PARSE_URL,
    RPC_URL,
    helius_slow_url,
    request_json,
    rpc_signatures,
)

WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
MINT = "So11111111111111111111111111111111111111112"


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {
        "ok": True,
        "port": 5050,
        "hasCredential": True,
        "hasNotifierConfigured": True,
        "rpcEndpoint": RPC_URL,
    }


def test_health_masks_api_key(make_client, settings):
    client = make_client(
        replace(settings, solana_rpc_url="https://mainnet.helius-rpc.com/?api-key=secret", telegram_chat_id="")
    )
    body = client.get("/api/health").json()
    assert body["rpcEndpoint"] == "https://mainnet.helius-rpc.com/?api-key=***"
    assert body["hasNotifierConfigured"] is False


def test_helius_fast_then_cache(client, fake_upstream):
    fake_upstream.on("POST", RPC_URL, json_body=rpc_signatures("a", "b", "c"))
    fake_upstream.on("POST", HELIUS_PARSE_URL, json_body=[{"signature": s} for s in "abc"])

    r1 = client.get("/api/helius-fast", params={"wallet": WALLET, "limit": 5})
    assert r1.status_code == 200
    assert r1.headers["X-Source"] == "fast-rpc+parse"
    assert len(r1.json()) == 3

    r2 = client.get("/api/helius-fast", params={"wallet": WALLET, "limit": 5})
    assert r2.headers["X-Source"] == "cache"
    assert r2.json() == r1.json()
    assert len(fake_upstream.calls_to("POST", RPC_URL)) == 1


def test_helius_fast_rate_limited(client, fake_upstream):
    fake_upstream.on("POST", RPC_URL, status=429, text="slow down")
    fake_upstream.on("GET", helius_slow_url(WALLET), json_body=[])
    r = client.get("/api/helius-fast", params={"wallet": WALLET})
    assert r.status_code == 200
    assert r.headers["X-Source"] == "slow-fallback-429"
    assert r.json() == []


def test_helius_fast_missing_wallet(client, fake_upstream):
    r = client.get("/api/helius-fast")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing wallet or API key"
    assert r.headers["Access-Control-Allow-Origin"] == "*"
    assert fake_upstream.calls == []


def test_helius_fast_missing_credential(make_client, settings):
    client = make_client(replace(settings, helius_api_key=""))
    r = client.get("/api/helius-fast", params={"wallet": WALLET})
    assert r.status_code == 400


def test_helius_fast_upstream_status_propagates(client, fake_upstream):
    fake_upstream.on("POST", RPC_URL, status=503, text="rpc unavailable")
    r = client.get("/api/helius-fast", params={"wallet": WALLET})
    assert r.status_code == 503
    assert r.json() == {"error": "RPC error", "details": "rpc unavailable"}


def test_helius_fast_malformed_parse(client, fake_upstream):
    fake_upstream.on("POST", RPC_URL, json_body=rpc_signatures("a"))
    fake_upstream.on("POST", HELIUS_PARSE_URL, json_body={"oops": True})
    r = client.get("/api/helius-fast", params={"wallet": WALLET})
    assert r.status_code == 502
    assert r.json()["reason"] == "malformed-response"


def test_helius_slow_route(client, fake_upstream):
    fake_upstream.on("GET", helius_slow_url(WALLET), json_body=[{"signature": "x"}])
    r = client.get("/api/helius", params={"wallet": WALLET, "limit": 3})
    assert r.status_code == 200
    assert r.json() == [{"signature": "x"}]
    assert "X-Source" not in r.headers

    fake_upstream.on("GET", helius_slow_url(WALLET), json_body={"items": []})
    r = client.get("/api/helius", params={"wallet": WALLET})
    assert r.status_code == 502


def test_token_metadata_route(client, fake_upstream):
    fake_upstream.on("GET", HELIUS_METADATA_URL, json_body=[{"symbol": "SOL", "name": "Wrapped SOL", "logoURI": "u"}])
    r = client.get("/api/token-metadata", params={"mint": MINT})
    assert r.status_code == 200
    assert r.json() == {"symbol": "SOL", "name": "Wrapped SOL", "logo": "u"}


def test_token_metadata_unknown_is_200(client):
    r = client.get("/api/token-metadata", params={"mint": MINT})
    assert r.status_code == 200
    assert r.json() == {"symbol": "", "name": "", "logo": ""}


def test_token_metadata_missing_mint(client):
    r = client.get("/api/token-metadata")
    assert r.status_code == 400
    assert r.json()["error"] == "Missing mint param"


def test_mint_born_null(client):
    r = client.get("/api/mint-born", params={"mint": MINT})
    assert r.status_code == 200
    assert r.json() == {"bornTs": None}


def test_notify_unconfigured(make_client, settings, fake_upstream):
    client = make_client(replace(settings, telegram_bot_token=""))
    r = client.post("/api/notify-swap", json={"side": "BUY", "mint": MINT})
    assert r.status_code == 200
    assert r.json() == {"ok": False, "reason": "Telegram not configured"}
    r = client.post("/api/notify-buy", json={"mint": MINT})
    assert r.json()["ok"] is False
    assert fake_upstream.calls == []


def test_notify_swap_sends(client, fake_upstream):
    url = "https://api.telegram.org/bot123:ABC/sendMessage"
    fake_upstream.on("POST", url, json_body={"ok": True})
    r = client.post("/api/notify-swap", json={"side": "BUY", "tokenName": "Cat", "sizeSOL": 0.1})
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert len(fake_upstream.calls_to("POST", url)) == 1


def test_notify_swap_ignores_non_numeric_size(client, fake_upstream):
    url = "https://api.telegram.org/bot123:ABC/sendMessage"
    fake_upstream.on("POST", url, json_body={"ok": True})
    r = client.post("/api/notify-swap", json={"side": "BUY", "tokenName": "Cat", "sizeSOL": "abc"})
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    sent = request_json(fake_upstream.calls_to("POST", url)[0])
    assert "Size:" not in sent["text"]


def test_mint_born_fractional(client, fake_upstream):
    fake_upstream.on("GET", "https://api.solana.fm/v0/tokens/" + MINT, json_body={"result": {"createdAt": 1690000000.5}})
    r = client.get("/api/mint-born", params={"mint": MINT})
    assert r.json() == {"bornTs": 1690000000.5}


def test_options_preflight(client):
    r = client.options("/api/helius-fast", headers={"Origin": "https://app.example"})
    assert r.status_code == 204
    assert r.headers["Access-Control-Allow-Origin"] == "https://app.example"
    assert r.headers["Access-Control-Allow-Methods"] == "GET,POST,OPTIONS"
    assert r.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization, x-chain"


def test_cors_on_success_echoes_origin(client):
    r = client.get("/api/health", headers={"Origin": "https://app.example"})
    assert r.headers["Access-Control-Allow-Origin"] == "https://app.example"


def test_unhandled_error_is_500_with_cors(client, monkeypatch):
    async def explode(wallet, limit=None):
        raise RuntimeError("kaboom")

    services = client.app.state.services
    monkeypatch.setattr(services.orchestrator, "fetch_wallet_activity", explode)
    r = client.get("/api/helius-fast", params={"wallet": WALLET}, headers={"Origin": "https://app.example"})
    assert r.status_code == 500
    assert r.json() == {"error": "Proxy error", "details": "kaboom"}
    assert r.headers["Access-Control-Allow-Origin"] == "https://app.example"
