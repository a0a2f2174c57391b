"""
FastAPI server — JSON proxy over Solana data providers and Telegram.

Routes (all under /api):
- GET  /health          service and configuration status
- GET  /helius-fast     freshest wallet transactions (cache / fast RPC+parse / slow fallback), X-Source header
- GET  /helius          wallet transactions from the slow indexer only, no caching
- GET  /token-metadata  {symbol, name, logo}, best-effort across providers
- GET  /mint-born       {bornTs}, best-effort mint creation time
- POST /notify-swap     BUY/SELL alert to Telegram
- POST /notify-buy      legacy BUY alert to Telegram

Config via env (HELIUS_API_KEY, SOLANA_RPC_URL, TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID, PORT).
The fetch store and the shared httpx client are created in the lifespan and
live on app.state; nothing is module-global.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from fastapi import Body, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_walletfeed import __version__
from backend_walletfeed.alerts.notifier import BuyEvent, SwapEvent, TradeNotifier
from backend_walletfeed.api_server.middleware import install_middleware
from backend_walletfeed.config import Settings, get_settings
from backend_walletfeed.config.env import mask_rpc_url
from backend_walletfeed.core.exceptions import ConfigurationError, UpstreamError, WalletFeedError
from backend_walletfeed.engine.cache import WalletFetchStore
from backend_walletfeed.engine.metadata import MetadataResolver
from backend_walletfeed.engine.orchestrator import RetrievalOrchestrator
from backend_walletfeed.upstream import (
    HeliusClient,
    SolanaRpcClient,
    TelegramClient,
    create_http_client,
)
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Services (built once per process in the lifespan)
# -----------------------------------------------------------------------------


@dataclass
class Services:
    settings: Settings
    http: httpx.AsyncClient
    store: WalletFetchStore
    orchestrator: RetrievalOrchestrator
    resolver: MetadataResolver
    notifier: TradeNotifier


def build_services(
    settings: Settings,
    http: httpx.AsyncClient,
    store: WalletFetchStore | None = None,
) -> Services:
    store = store or WalletFetchStore(max_wallets=settings.cache_max_wallets)
    helius = HeliusClient(http, settings.helius_api_key)
    rpc = SolanaRpcClient(http, settings.solana_rpc_url)
    return Services(
        settings=settings,
        http=http,
        store=store,
        orchestrator=RetrievalOrchestrator(store, rpc, helius),
        resolver=MetadataResolver(http, helius),
        notifier=TradeNotifier(TelegramClient(http, settings.telegram_bot_token, settings.telegram_chat_id)),
    )


def get_services(request: Request) -> Services:
    """Dependency: services attached to the app by the lifespan."""
    return request.app.state.services


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------


class HealthResponse(BaseModel):
    ok: bool = Field(True, description="API is up")
    port: int = Field(..., description="Configured listen port")
    hasCredential: bool = Field(..., description="HELIUS_API_KEY is set")
    hasNotifierConfigured: bool = Field(..., description="Telegram bot token and chat id are set")
    rpcEndpoint: str = Field(..., description="Solana RPC URL (API key masked)")


class MetadataResponse(BaseModel):
    symbol: str = ""
    name: str = ""
    logo: str = ""


class MintBornResponse(BaseModel):
    bornTs: int | float | None = Field(None, description="Unix seconds when the mint was first seen, or null")


class NotifyResponse(BaseModel):
    ok: bool
    reason: str | None = None


def _require_mint(mint: str | None) -> str:
    mint = (mint or "").strip()
    if not mint:
        raise ConfigurationError("Missing mint param")
    return mint


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    http_factory: Callable[[], httpx.AsyncClient] = create_http_client,
) -> FastAPI:
    """
    Build the ASGI app. settings default to the environment at startup;
    http_factory lets tests supply a client with a mock transport.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or get_settings()
        http = http_factory()
        app.state.services = build_services(cfg, http)
        logger.info(
            "walletfeed_started",
            port=cfg.api_port,
            rpc=mask_rpc_url(cfg.solana_rpc_url),
            helius_key="present" if cfg.has_credential else "MISSING",
            telegram="configured" if cfg.has_notifier else "not configured",
            cache_max_wallets=cfg.cache_max_wallets,
        )
        try:
            yield
        finally:
            await http.aclose()
            logger.info("walletfeed_stopped")

    app = FastAPI(
        title="Backend WalletFeed API",
        description="Aggregation proxy for Solana wallet activity, token metadata and trade alerts.",
        version=__version__,
        lifespan=lifespan,
    )
    install_middleware(app)

    @app.exception_handler(WalletFeedError)
    async def walletfeed_error_handler(request: Request, exc: WalletFeedError) -> JSONResponse:
        """ConfigurationError -> 400, UpstreamError -> provider status (502/599 when synthetic)."""
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/api/health", response_model=HealthResponse)
    async def health(services: Services = Depends(get_services)) -> HealthResponse:
        cfg = services.settings
        return HealthResponse(
            ok=True,
            port=cfg.api_port,
            hasCredential=cfg.has_credential,
            hasNotifierConfigured=cfg.has_notifier,
            rpcEndpoint=mask_rpc_url(cfg.solana_rpc_url),
        )

    @app.get("/api/helius-fast")
    async def helius_fast(
        wallet: str | None = None,
        limit: str | None = None,
        services: Services = Depends(get_services),
    ) -> JSONResponse:
        """Freshest transactions; X-Source names the path that produced them."""
        result = await services.orchestrator.fetch_wallet_activity(wallet, limit)
        return JSONResponse(content=result.records, headers={"X-Source": result.source})

    @app.get("/api/helius")
    async def helius_slow(
        wallet: str | None = None,
        limit: str | None = None,
        services: Services = Depends(get_services),
    ) -> list[Any]:
        return await services.orchestrator.fetch_slow_only(wallet, limit)

    @app.get("/api/token-metadata", response_model=MetadataResponse)
    async def token_metadata(
        mint: str | None = None,
        services: Services = Depends(get_services),
    ) -> MetadataResponse:
        meta = await services.resolver.resolve_token_metadata(_require_mint(mint))
        return MetadataResponse(**meta.to_dict())

    @app.get("/api/mint-born", response_model=MintBornResponse)
    async def mint_born(
        mint: str | None = None,
        services: Services = Depends(get_services),
    ) -> MintBornResponse:
        born = await services.resolver.resolve_mint_born(_require_mint(mint))
        return MintBornResponse(bornTs=born)

    @app.post("/api/notify-swap", response_model=NotifyResponse, response_model_exclude_none=True)
    async def notify_swap(
        event: SwapEvent | None = Body(None),
        services: Services = Depends(get_services),
    ) -> Any:
        try:
            return await services.notifier.notify_swap(event or SwapEvent())
        except UpstreamError as e:
            logger.error("notify_swap_failed", error=str(e), details=e.details)
            return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})

    @app.post("/api/notify-buy", response_model=NotifyResponse, response_model_exclude_none=True)
    async def notify_buy(
        event: BuyEvent | None = Body(None),
        services: Services = Depends(get_services),
    ) -> Any:
        try:
            return await services.notifier.notify_buy(event or BuyEvent())
        except UpstreamError as e:
            logger.error("notify_buy_failed", error=str(e), details=e.details)
            return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})

    return app


app = create_app()
