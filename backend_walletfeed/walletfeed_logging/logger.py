"""
Structured JSON logging for the proxy.

Every record carries event_type, level, logger and an ISO timestamp, plus
whatever context the caller binds (wallet_id, provider, source, status_code).
Upstream URLs and error strings regularly embed the Helius api-key or the
Telegram bot token; the redaction processor masks both before rendering.

Only stdlib logging and structlog are imported here, so any backend_walletfeed
module can import this one.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# "json" (default) or anything else for the console renderer
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

ROOT_LOGGER_NAME = "backend_walletfeed"

_API_KEY_RE = re.compile(r"(api-key=)[^&\s\"']+", re.IGNORECASE)
_BOT_TOKEN_RE = re.compile(r"(/bot)\d+:[\w-]+")


def redact(text: str) -> str:
    """Mask api-key query values and Telegram bot tokens in a string."""
    text = _API_KEY_RE.sub(r"\1***", text)
    return _BOT_TOKEN_RE.sub(r"\1***", text)


def _redact_secrets(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = redact(value)
    return event_dict


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's 'event' key becomes event_type; message mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def configure_structlog() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _add_timestamp,
        _event_type,
        _redact_secrets,
    ]
    if LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger; pass event_type as the first argument:

        logger = get_logger(__name__)
        logger.warning("upstream_timeout", provider="solana-rpc")
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_wallet(wallet_id: str, name: str = ROOT_LOGGER_NAME, **context: Any) -> structlog.BoundLogger:
    """
    Per-request logger with wallet_id (and any extra context) bound, so one
    wallet's cache/cooldown/fallback decisions can be traced together:

        log = bind_wallet(wallet, __name__, limit=40)
        log.info("wallet_activity_served", source="cache", count=3)
    """
    return get_logger(name).bind(wallet_id=wallet_id, **context)
