"""
Trade notifications: format swap/buy events as Telegram HTML and dispatch.

Message layout:
    <b>BUY Alert</b>
    Time: <b>12:01:07</b>
    Token: <a href="https://solscan.io/token/...">NAME</a>
    Since born: <b>4 min</b>
    Size: <b>0.250000 SOL</b>
    Wallet: <code>...</code>
    Tx: <a href="https://solscan.io/tx/...">Solscan</a>
    Trade: <a href="https://app.axiom.trade/token/...">Axiom</a>

Optional lines are omitted when the event lacks the field. When a logo URL is
given, a photo with the token name as caption follows the text message.
"""

from __future__ import annotations

import html
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend_walletfeed.upstream.telegram import TelegramClient
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

SOLSCAN_TOKEN_URL = "https://solscan.io/token/{mint}"
SOLSCAN_TX_URL = "https://solscan.io/tx/{signature}"
AXIOM_TOKEN_URL = "https://app.axiom.trade/token/{mint}"
NOT_CONFIGURED_REASON = "Telegram not configured"


def _number_or_none(value: Any) -> float | None:
    """Numeric fields are optional decorations: anything but a JSON number is dropped."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


class SwapEvent(BaseModel):
    """POST /api/notify-swap body (BUY | SELL)."""

    model_config = ConfigDict(extra="ignore")

    side: str | None = Field(None, description="BUY | SELL")
    time: str | None = Field(None, description="Pre-formatted time string")
    tokenName: str | None = None
    symbol: str | None = None
    mint: str | None = None
    sizeSOL: float | None = None
    signature: str | None = None
    logo: str | None = Field(None, description="Token logo URL")
    minutesSinceBorn: float | None = None
    tokenUrl: str | None = None
    txUrl: str | None = None
    tradeUrl: str | None = None
    wallet: str | None = None

    @field_validator("sizeSOL", "minutesSinceBorn", mode="before")
    @classmethod
    def lenient_number(cls, value: Any) -> float | None:
        return _number_or_none(value)


class BuyEvent(BaseModel):
    """POST /api/notify-buy body (legacy buy notifier)."""

    model_config = ConfigDict(extra="ignore")

    mint: str | None = None
    tokenName: str | None = None
    symbol: str | None = None
    wallet: str | None = None
    signature: str | None = None
    solUsed: float | None = None
    minutesSinceBorn: float | None = None
    tokenLogo: str | None = None

    @field_validator("solUsed", "minutesSinceBorn", mode="before")
    @classmethod
    def lenient_number(cls, value: Any) -> float | None:
        return _number_or_none(value)


def display_name(token_name: str | None, symbol: str | None, mint: str | None) -> str:
    if token_name:
        return token_name
    if symbol:
        return symbol
    if mint:
        return mint[:6] + "…"
    return "Unknown"


def _minutes(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def format_trade_message(
    *,
    side: str,
    name: str,
    token_link: str,
    time: str | None = None,
    minutes_since_born: float | None = None,
    size_sol: float | None = None,
    wallet: str | None = None,
    tx_link: str = "",
    trade_link: str = "",
) -> str:
    esc = html.escape
    lines = [f"<b>{esc(side)} Alert</b>"]
    if time:
        lines.append(f"Time: <b>{esc(time)}</b>")
    lines.append(f'Token: <a href="{esc(token_link)}">{esc(name)}</a>')
    if minutes_since_born is not None:
        lines.append(f"Since born: <b>{_minutes(minutes_since_born)} min</b>")
    if size_sol is not None:
        lines.append(f"Size: <b>{size_sol:.6f} SOL</b>")
    if wallet:
        lines.append(f"Wallet: <code>{esc(wallet)}</code>")
    if tx_link:
        lines.append(f'Tx: <a href="{esc(tx_link)}">Solscan</a>')
    if trade_link:
        lines.append(f'Trade: <a href="{esc(trade_link)}">Axiom</a>')
    return "\n".join(lines) + "\n"


def format_swap(event: SwapEvent) -> tuple[str, str]:
    """Return (html, display_name) for a swap event."""
    name = display_name(event.tokenName, event.symbol, event.mint)
    mint = event.mint or ""
    token_link = event.tokenUrl or (SOLSCAN_TOKEN_URL.format(mint=mint) if mint else "")
    tx_link = event.txUrl or (SOLSCAN_TX_URL.format(signature=event.signature) if event.signature else "")
    trade_link = event.tradeUrl or (AXIOM_TOKEN_URL.format(mint=mint) if mint else "")
    text = format_trade_message(
        side=event.side or "SWAP",
        name=name,
        token_link=token_link,
        time=event.time,
        minutes_since_born=event.minutesSinceBorn,
        size_sol=event.sizeSOL,
        wallet=event.wallet,
        tx_link=tx_link,
        trade_link=trade_link,
    )
    return text, name


def format_buy(event: BuyEvent) -> tuple[str, str]:
    """Return (html, display_name) for a legacy buy event."""
    name = display_name(event.tokenName, event.symbol, event.mint)
    mint = event.mint or ""
    text = format_trade_message(
        side="BUY",
        name=name,
        token_link=SOLSCAN_TOKEN_URL.format(mint=mint) if mint else "",
        minutes_since_born=event.minutesSinceBorn,
        size_sol=event.solUsed,
        wallet=event.wallet,
        tx_link=SOLSCAN_TX_URL.format(signature=event.signature) if event.signature else "",
        trade_link=AXIOM_TOKEN_URL.format(mint=mint) if mint else "",
    )
    return text, name


class TradeNotifier:
    """Formats trade events and relays them through the Telegram client."""

    def __init__(self, telegram: TelegramClient) -> None:
        self.telegram = telegram

    @property
    def configured(self) -> bool:
        return self.telegram.configured

    async def _dispatch(self, kind: str, text: str, caption: str, photo: str | None) -> dict[str, Any]:
        if not self.configured:
            logger.info("notify_skipped", kind=kind, reason=NOT_CONFIGURED_REASON)
            return {"ok": False, "reason": NOT_CONFIGURED_REASON}
        await self.telegram.send_message(text)
        if photo:
            await self.telegram.send_photo(photo, caption)
        logger.info("notify_sent", kind=kind, token=caption, with_photo=bool(photo))
        return {"ok": True}

    async def notify_swap(self, event: SwapEvent) -> dict[str, Any]:
        text, name = format_swap(event)
        return await self._dispatch("swap", text, name, event.logo)

    async def notify_buy(self, event: BuyEvent) -> dict[str, Any]:
        text, name = format_buy(event)
        return await self._dispatch("buy", text, name, event.tokenLogo)
