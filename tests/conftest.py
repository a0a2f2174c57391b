"""
Pytest fixtures for WalletFeed tests.

Upstream providers are faked with httpx.MockTransport (FakeUpstream routes by
method + URL without query string); time is driven by FakeClock so cache TTL and
cooldown windows are deterministic.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from backend_walletfeed.config import Settings
from backend_walletfeed.engine.cache import WalletFetchStore
from backend_walletfeed.engine.metadata import MetadataResolver
from backend_walletfeed.engine.orchestrator import RetrievalOrchestrator
from backend_walletfeed.upstream import HeliusClient, SolanaRpcClient, TelegramClient

RPC_URL = "https://rpc.test"
HELIUS_KEY = "test-key"
BOT_TOKEN = "123:ABC"
CHAT_ID = "42"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Route table for httpx.MockTransport; unknown routes answer 404."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.calls: list[httpx.Request] = []

    @staticmethod
    def _key(method: str, url: str) -> tuple[str, str]:
        u = httpx.URL(url)
        return method.upper(), f"{u.scheme}://{u.host}{u.path}"

    def on(
        self,
        method: str,
        url: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
        exc: Exception | None = None,
        handler: Handler | None = None,
    ) -> None:
        if handler is not None:
            self.routes[self._key(method, url)] = handler
            return

        def static(request: httpx.Request) -> httpx.Response:
            if exc is not None:
                raise exc
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json_body)

        self.routes[self._key(method, url)] = static

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, text="not found")
        return handler(request)

    def calls_to(self, method: str, url: str) -> list[httpx.Request]:
        key = self._key(method, url)
        return [
            r for r in self.calls
            if (r.method, f"{r.url.scheme}://{r.url.host}{r.url.path}") == key
        ]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))


def rpc_signatures(*signatures: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": "getSigs",
        "result": [{"signature": s, "slot": 1, "err": None} for s in signatures],
    }


def helius_slow_url(wallet: str) -> str:
    return f"https://api.helius.xyz/v0/addresses/{wallet}/transactions"


HELIUS_PARSE_URL = "https://api.helius.xyz/v0/transactions"
HELIUS_METADATA_URL = "https://api.helius.xyz/v0/tokens/metadata"


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> WalletFetchStore:
    return WalletFetchStore(max_wallets=100, clock=clock)


@pytest.fixture
def orchestrator(fake_upstream, store) -> RetrievalOrchestrator:
    http = fake_upstream.client()
    return RetrievalOrchestrator(
        store,
        SolanaRpcClient(http, RPC_URL),
        HeliusClient(http, HELIUS_KEY),
    )


@pytest.fixture
def resolver(fake_upstream) -> MetadataResolver:
    http = fake_upstream.client()
    return MetadataResolver(http, HeliusClient(http, HELIUS_KEY))


@pytest.fixture
def telegram(fake_upstream) -> TelegramClient:
    return TelegramClient(fake_upstream.client(), BOT_TOKEN, CHAT_ID)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        helius_api_key=HELIUS_KEY,
        solana_rpc_url=RPC_URL,
        telegram_bot_token=BOT_TOKEN,
        telegram_chat_id=CHAT_ID,
        api_host="127.0.0.1",
        api_port=5050,
        cache_max_wallets=100,
    )


@pytest.fixture
def make_client(fake_upstream):
    """Factory: FastAPI TestClient over the fake upstream for the given settings."""
    from fastapi.testclient import TestClient

    from backend_walletfeed.api_server.server import create_app

    clients: list[TestClient] = []

    def _make(cfg: Settings) -> TestClient:
        app = create_app(settings=cfg, http_factory=fake_upstream.client)
        tc = TestClient(app)
        tc.__enter__()
        clients.append(tc)
        return tc

    yield _make
    for tc in clients:
        tc.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)
