"""
Per-wallet freshness cache and rate-limit cooldown store.

One WalletFetchState per wallet holds the last fetched transaction list with
its timestamp, plus the deadline until which the fast path must be skipped.
Freshness and cooldown are independent: a wallet can be in cooldown while its
cached data is stale, and vice versa.

Times are monotonic seconds from the store's clock; TTLs and durations are
given in milliseconds. The store is bounded: once more than `max_wallets`
wallets are tracked, the least recently used entry is dropped.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Any, Callable

from backend_walletfeed.config.env import DEFAULT_CACHE_MAX_WALLETS


@dataclass
class WalletFetchState:
    last_fetch_ts: float | None = None
    cached_result: list[Any] | None = None
    cooldown_until: float | None = None


class WalletFetchStore:
    """Thread-safe map of wallet -> WalletFetchState."""

    def __init__(
        self,
        max_wallets: int = DEFAULT_CACHE_MAX_WALLETS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_wallets < 1:
            raise ValueError("max_wallets must be >= 1")
        self.max_wallets = max_wallets
        self.clock = clock
        self._entries: OrderedDict[str, WalletFetchState] = OrderedDict()
        self._lock = threading.Lock()

    def now(self) -> float:
        return self.clock()

    def _entry(self, wallet: str) -> WalletFetchState:
        # caller holds the lock
        state = self._entries.get(wallet)
        if state is None:
            state = WalletFetchState()
            self._entries[wallet] = state
            while len(self._entries) > self.max_wallets:
                self._entries.popitem(last=False)
        else:
            self._entries.move_to_end(wallet)
        return state

    def get_fresh(self, wallet: str, max_age_ms: float, now: float | None = None) -> list[Any] | None:
        """Cached data when younger than max_age_ms, else None."""
        if now is None:
            now = self.clock()
        with self._lock:
            state = self._entries.get(wallet)
            if state is None or state.last_fetch_ts is None or state.cached_result is None:
                return None
            if (now - state.last_fetch_ts) * 1000.0 < max_age_ms:
                return list(state.cached_result)
            return None

    def put(self, wallet: str, data: list[Any], now: float | None = None) -> None:
        """Store data stamped with `now` (the request start), defaulting to the clock."""
        if now is None:
            now = self.clock()
        with self._lock:
            state = self._entry(wallet)
            state.cached_result = list(data)
            state.last_fetch_ts = now

    def is_in_cooldown(self, wallet: str, now: float | None = None) -> bool:
        if now is None:
            now = self.clock()
        with self._lock:
            state = self._entries.get(wallet)
            return bool(state and state.cooldown_until is not None and now < state.cooldown_until)

    def enter_cooldown(self, wallet: str, now: float, duration_ms: float) -> float:
        """Set cooldown_until = now + duration, overwriting any earlier deadline. Returns the deadline."""
        until = now + duration_ms / 1000.0
        with self._lock:
            self._entry(wallet).cooldown_until = until
        return until

    def get_state(self, wallet: str) -> WalletFetchState | None:
        """Snapshot of a wallet's state (copy), or None when untracked."""
        with self._lock:
            state = self._entries.get(wallet)
            if state is None:
                return None
            cached = list(state.cached_result) if state.cached_result is not None else None
            return replace(state, cached_result=cached)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, wallet: object) -> bool:
        with self._lock:
            return wallet in self._entries
