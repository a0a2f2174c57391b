"""
Token metadata and mint-origin resolvers.

Both probe providers in a fixed priority order via first_success() and never
raise on provider failure: the empty MetadataResult and None are the only
"unknown" outcomes. Stateless; nothing is cached.

Metadata order: Helius (only with an API key) -> Jupiter -> SolanaFM ->
Birdeye -> Solana Labs token list.
Mint-origin order: SolanaFM (firstSeen / createdAt, seconds) -> Birdeye
(createdTime, milliseconds).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import httpx

from backend_walletfeed.engine.probes import Probe, first_success
from backend_walletfeed.upstream.helius import HeliusClient
from backend_walletfeed.upstream.token_sources import (
    fetch_birdeye_token,
    fetch_jupiter_token,
    fetch_solanafm_token,
    fetch_token_list_entry,
)
from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MetadataResult:
    symbol: str = ""
    name: str = ""
    logo: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.symbol or self.name or self.logo)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


UNKNOWN_METADATA = MetadataResult()


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def metadata_from_token(token: dict[str, Any] | None) -> MetadataResult | None:
    """Map a provider token object ({symbol, name, logoURI}) to MetadataResult."""
    if not isinstance(token, dict):
        return None
    return MetadataResult(
        symbol=_text(token.get("symbol")),
        name=_text(token.get("name")),
        logo=_text(token.get("logoURI")),
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class MetadataResolver:
    def __init__(self, http: httpx.AsyncClient, helius: HeliusClient | None = None) -> None:
        self._http = http
        self.helius = helius

    def metadata_probes(self, mint: str) -> list[Probe[MetadataResult]]:
        async def helius_probe() -> MetadataResult | None:
            return metadata_from_token(await self.helius.token_metadata(mint))

        async def jupiter_probe() -> MetadataResult | None:
            return metadata_from_token(await fetch_jupiter_token(self._http, mint))

        async def solanafm_probe() -> MetadataResult | None:
            return metadata_from_token(await fetch_solanafm_token(self._http, mint))

        async def birdeye_probe() -> MetadataResult | None:
            return metadata_from_token(await fetch_birdeye_token(self._http, mint))

        async def token_list_probe() -> MetadataResult | None:
            return metadata_from_token(await fetch_token_list_entry(self._http, mint))

        probes: list[Probe[MetadataResult]] = []
        if self.helius is not None and self.helius.api_key:
            probes.append(Probe("helius", helius_probe))
        probes.extend(
            [
                Probe("jupiter", jupiter_probe),
                Probe("solanafm", solanafm_probe),
                Probe("birdeye", birdeye_probe),
                Probe("solana-token-list", token_list_probe),
            ]
        )
        return probes

    def mint_born_probes(self, mint: str) -> list[Probe[float]]:
        async def solanafm_probe() -> float | None:
            token = await fetch_solanafm_token(self._http, mint)
            if not token:
                return None
            for key in ("firstSeen", "createdAt"):
                if _is_number(token.get(key)):
                    return token[key]
            return None

        async def birdeye_probe() -> float | None:
            token = await fetch_birdeye_token(self._http, mint)
            created_ms = token.get("createdTime") if token else None
            if not _is_number(created_ms) or not created_ms:
                return None
            return int(created_ms // 1000)

        return [Probe("solanafm", solanafm_probe), Probe("birdeye", birdeye_probe)]

    async def resolve_token_metadata(self, mint: str) -> MetadataResult:
        """First provider with a non-empty symbol, name or logo wins; else the empty sentinel."""
        result, provider = await first_success(
            self.metadata_probes(mint),
            lambda meta: not meta.is_empty,
            context={"mint": mint},
        )
        if result is None:
            logger.info("token_metadata_unknown", mint=mint)
            return UNKNOWN_METADATA
        logger.debug("token_metadata_resolved", mint=mint, provider=provider)
        return result

    async def resolve_mint_born(self, mint: str) -> float | None:
        """Best-effort creation time of a mint (unix seconds), or None."""
        born, provider = await first_success(
            self.mint_born_probes(mint),
            bool,
            context={"mint": mint},
        )
        logger.debug("mint_born_resolved", mint=mint, provider=provider, born_ts=born)
        return born
