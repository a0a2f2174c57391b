"""
Application-level exceptions.

ConfigurationError and UpstreamError (with MalformedResponse) map to HTTP
status codes at the API boundary. RateLimited is internal: the orchestrator
turns it into a per-wallet cooldown and a slow-path fallback.
"""

from __future__ import annotations

from typing import Any

# Synthetic status for network failure / timeout (no HTTP response received)
STATUS_UNREACHABLE = 599
STATUS_BAD_GATEWAY = 502


class WalletFeedError(Exception):
    """Base class for all WalletFeed errors."""

    status_code: int = 500

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self)}


class ConfigurationError(WalletFeedError):
    """Missing wallet, mint or provider credential."""

    status_code = 400


class UpstreamError(WalletFeedError):
    """Non-success provider response or network failure."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: int = STATUS_BAD_GATEWAY,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": str(self), "details": self.details}


class MalformedResponse(UpstreamError):
    """Provider answered 2xx but with an unexpected payload shape."""

    reason = "malformed-response"

    def __init__(self, message: str, *, provider: str, details: Any = None) -> None:
        super().__init__(message, provider=provider, status_code=STATUS_BAD_GATEWAY, details=details)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["reason"] = self.reason
        return out


class RateLimited(WalletFeedError):
    """Provider signalled a rate limit (HTTP 429 or JSON-RPC error code 429)."""

    status_code = 429

    def __init__(self, provider: str, details: Any = None) -> None:
        super().__init__(f"{provider} rate limited")
        self.provider = provider
        self.details = details
