"""
Environment variable loading for WalletFeed.

- HELIUS_API_KEY: Helius API key (fast parse, slow indexer, token metadata)
- SOLANA_RPC_URL: JSON-RPC endpoint for getSignaturesForAddress (default: mainnet-beta)
- TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID: notification target
- PORT / API_HOST: listen address (default 0.0.0.0:5050)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_walletfeed/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_PORT = 5050
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CACHE_MAX_WALLETS = 10_000


def load_walletfeed_env() -> None:
    """Load .env from project root. Existing environment variables win. Safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def get_helius_api_key() -> str:
    load_walletfeed_env()
    return _env("HELIUS_API_KEY")


def get_solana_rpc_url() -> str:
    """Resolve Solana RPC URL: SOLANA_RPC_URL override, else public mainnet-beta."""
    load_walletfeed_env()
    return _env("SOLANA_RPC_URL") or MAINNET_RPC_URL


def get_telegram_credentials() -> tuple[str, str]:
    """Return (bot_token, chat_id); either may be empty when not configured."""
    load_walletfeed_env()
    return _env("TELEGRAM_BOT_TOKEN"), _env("TELEGRAM_CHAT_ID")


def get_listen_port() -> int:
    load_walletfeed_env()
    raw = _env("PORT")
    try:
        return int(raw) if raw else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT


def get_listen_host() -> str:
    load_walletfeed_env()
    return _env("API_HOST") or DEFAULT_HOST


def get_cache_max_wallets() -> int:
    """Bound on distinct wallets held by the fetch store (WALLET_CACHE_MAX_WALLETS)."""
    load_walletfeed_env()
    raw = _env("WALLET_CACHE_MAX_WALLETS")
    try:
        value = int(raw) if raw else DEFAULT_CACHE_MAX_WALLETS
    except ValueError:
        return DEFAULT_CACHE_MAX_WALLETS
    return max(1, value)


def mask_rpc_url(url: str) -> str:
    """Mask API key in an RPC URL before logging it."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
