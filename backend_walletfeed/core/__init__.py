"""
Core utilities — exceptions shared by the upstream clients, the retrieval
engine and the API server.
"""

from backend_walletfeed.core.exceptions import (
    ConfigurationError,
    MalformedResponse,
    RateLimited,
    UpstreamError,
    WalletFeedError,
)

__all__ = [
    "ConfigurationError",
    "MalformedResponse",
    "RateLimited",
    "UpstreamError",
    "WalletFeedError",
]
