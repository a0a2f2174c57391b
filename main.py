"""
Main entrypoint: run the WalletFeed FastAPI server with uvicorn.

Env: HELIUS_API_KEY, TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID, SOLANA_RPC_URL,
API_HOST (default 0.0.0.0), PORT (default 5050), LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn backend_walletfeed.api_server.app:app --host 0.0.0.0 --port 5050
"""

# Configure structured JSON logging before other imports that may log
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger("main")


def main() -> None:
    import uvicorn

    from backend_walletfeed.config import get_settings

    settings = get_settings()
    logger.info("main_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        "backend_walletfeed.api_server.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
