"""
Upstream clients — stateless async wrappers around third-party providers.

Solana JSON-RPC, Helius (parse, address history, token metadata), public
token-metadata sources and the Telegram Bot API. Every call is bounded by
a 15 s timeout.
"""

from backend_walletfeed.upstream.helius import HeliusClient
from backend_walletfeed.upstream.http import REQUEST_TIMEOUT, create_http_client
from backend_walletfeed.upstream.solana_rpc import SolanaRpcClient
from backend_walletfeed.upstream.telegram import TelegramClient

__all__ = [
    "HeliusClient",
    "REQUEST_TIMEOUT",
    "SolanaRpcClient",
    "TelegramClient",
    "create_http_client",
]
