"""
Retrieval orchestrator: freshest transactions for a wallet.

Decision order per request:
1. fresh cache (15 s)                      -> source "cache"
2. wallet in rate-limit cooldown           -> slow Helius indexer, "slow-fallback-cooldown"
3. fast path: RPC getSignaturesForAddress, then Helius batch parse
   - RPC rate limited: 45 s cooldown, slow indexer, "slow-fallback-429"
   - no signatures:                          "fast-empty"
   - parsed:                                 "fast-rpc+parse"

The cooldown is scoped to the wallet, never global. Non-rate-limit failures
propagate as UpstreamError and leave cache and cooldown untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from backend_walletfeed.core.exceptions import ConfigurationError, RateLimited
from backend_walletfeed.engine.cache import WalletFetchStore
from backend_walletfeed.upstream.helius import HeliusClient
from backend_walletfeed.upstream.solana_rpc import SolanaRpcClient
from backend_walletfeed.walletfeed_logging import bind_wallet

FAST_TTL_MS = 15_000
COOLDOWN_MS = 45_000
DEFAULT_LIMIT = 40
MIN_LIMIT = 1
MAX_LIMIT = 100

SOURCE_CACHE = "cache"
SOURCE_SLOW_COOLDOWN = "slow-fallback-cooldown"
SOURCE_SLOW_429 = "slow-fallback-429"
SOURCE_FAST_EMPTY = "fast-empty"
SOURCE_FAST = "fast-rpc+parse"


@dataclass
class FetchResult:
    records: list[Any]
    source: str


def clamp_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """Clamp to [1, 100]; default when absent or non-numeric."""
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return max(MIN_LIMIT, min(MAX_LIMIT, int(value)))


class RetrievalOrchestrator:
    """Owns the cache/cooldown decision logic; the store is shared across requests."""

    def __init__(
        self,
        store: WalletFetchStore,
        rpc: SolanaRpcClient,
        helius: HeliusClient,
        *,
        fast_ttl_ms: int = FAST_TTL_MS,
        cooldown_ms: int = COOLDOWN_MS,
    ) -> None:
        self.store = store
        self.rpc = rpc
        self.helius = helius
        self.fast_ttl_ms = fast_ttl_ms
        self.cooldown_ms = cooldown_ms

    def _validate(self, wallet: str | None) -> str:
        wallet = (wallet or "").strip()
        if not wallet or not self.helius.api_key:
            raise ConfigurationError("Missing wallet or API key")
        return wallet

    async def _slow_path(self, wallet: str, limit: int, source: str, now: float, log: Any) -> FetchResult:
        records = await self.helius.address_transactions(wallet, limit)
        self.store.put(wallet, records, now=now)
        log.info("wallet_activity_served", source=source, count=len(records))
        return FetchResult(records=records, source=source)

    async def fetch_wallet_activity(self, wallet: str | None, limit: Any = None) -> FetchResult:
        wallet = self._validate(wallet)
        lim = clamp_limit(limit)
        log = bind_wallet(wallet, __name__, limit=lim)
        # one reference time for freshness, cooldown and the cache stamp
        now = self.store.now()

        cached = self.store.get_fresh(wallet, self.fast_ttl_ms, now=now)
        if cached is not None:
            log.debug("wallet_activity_served", source=SOURCE_CACHE, count=len(cached))
            return FetchResult(records=cached, source=SOURCE_CACHE)

        if self.store.is_in_cooldown(wallet, now):
            return await self._slow_path(wallet, lim, SOURCE_SLOW_COOLDOWN, now, log)

        try:
            signatures = await self.rpc.get_signatures_for_address(wallet, lim)
        except RateLimited as e:
            self.store.enter_cooldown(wallet, now, self.cooldown_ms)
            log.warning("rpc_rate_limited", cooldown_ms=self.cooldown_ms, details=e.details)
            return await self._slow_path(wallet, lim, SOURCE_SLOW_429, now, log)

        if not signatures:
            self.store.put(wallet, [], now=now)
            log.info("wallet_activity_served", source=SOURCE_FAST_EMPTY, count=0)
            return FetchResult(records=[], source=SOURCE_FAST_EMPTY)

        parsed = await self.helius.parse_transactions(signatures)
        self.store.put(wallet, parsed, now=now)
        log.info("wallet_activity_served", source=SOURCE_FAST, count=len(parsed))
        return FetchResult(records=parsed, source=SOURCE_FAST)

    async def fetch_slow_only(self, wallet: str | None, limit: Any = None) -> list[Any]:
        """Direct indexer query: no cache, no cooldown, strict payload shape."""
        wallet = self._validate(wallet)
        return await self.helius.address_transactions(wallet, clamp_limit(limit, default=20), strict=True)
