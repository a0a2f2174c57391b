"""
Application settings.

Typed snapshot of the environment (credentials, RPC URL, listen address,
cache bound) built once per process by the API lifespan and passed to the
components that need it.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_walletfeed.config.env import (
    get_cache_max_wallets,
    get_helius_api_key,
    get_listen_host,
    get_listen_port,
    get_solana_rpc_url,
    get_telegram_credentials,
)


@dataclass(frozen=True)
class Settings:
    helius_api_key: str
    solana_rpc_url: str
    telegram_bot_token: str
    telegram_chat_id: str
    api_host: str
    api_port: int
    cache_max_wallets: int

    @property
    def has_credential(self) -> bool:
        return bool(self.helius_api_key)

    @property
    def has_notifier(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


def get_settings() -> Settings:
    """Return the current application settings read from the environment."""
    bot_token, chat_id = get_telegram_credentials()
    return Settings(
        helius_api_key=get_helius_api_key(),
        solana_rpc_url=get_solana_rpc_url(),
        telegram_bot_token=bot_token,
        telegram_chat_id=chat_id,
        api_host=get_listen_host(),
        api_port=get_listen_port(),
        cache_max_wallets=get_cache_max_wallets(),
    )
