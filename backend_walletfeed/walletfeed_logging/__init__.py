"""
Structured logging for Backend WalletFeed.

JSON logs with timestamp, event_type, wallet_id and upstream context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from backend_walletfeed.walletfeed_logging.logger import bind_wallet, get_logger

__all__ = ["bind_wallet", "get_logger"]
