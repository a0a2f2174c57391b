"""Telegram Bot API client (sendMessage / sendPhoto) for trade notifications."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from backend_walletfeed.upstream.http import error_details, send
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"
PROVIDER = "telegram"


class TelegramClient:
    def __init__(self, http: httpx.AsyncClient, bot_token: str, chat_id: str) -> None:
        self._http = http
        self.bot_token = bot_token
        self.chat_id = chat_id

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def _url(self, method: str) -> str:
        return f"{TELEGRAM_API_BASE}/bot{quote(self.bot_token, safe=':')}/{method}"

    async def _post(self, method: str, body: dict[str, Any]) -> bool:
        r = await send(self._http, "POST", self._url(method), provider=PROVIDER, json=body)
        if not r.is_success:
            logger.warning("telegram_non_ok", method=method, status_code=r.status_code, details=error_details(r))
        return r.is_success

    async def send_message(self, html: str) -> bool:
        return await self._post(
            "sendMessage",
            {
                "chat_id": self.chat_id,
                "text": html,
                "parse_mode": "HTML",
                "disable_web_page_preview": False,
            },
        )

    async def send_photo(self, photo_url: str, caption: str) -> bool:
        return await self._post(
            "sendPhoto",
            {
                "chat_id": self.chat_id,
                "photo": photo_url,
                "caption": caption,
                "parse_mode": "HTML",
            },
        )
