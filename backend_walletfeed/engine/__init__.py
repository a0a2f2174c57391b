"""
Retrieval engine — freshness cache/cooldown store, wallet activity
orchestrator, and ordered-fallback token metadata resolvers.
"""

from backend_walletfeed.engine.cache import WalletFetchState, WalletFetchStore
from backend_walletfeed.engine.metadata import MetadataResolver, MetadataResult
from backend_walletfeed.engine.orchestrator import FetchResult, RetrievalOrchestrator, clamp_limit
from backend_walletfeed.engine.probes import Probe, first_success

__all__ = [
    "FetchResult",
    "MetadataResolver",
    "MetadataResult",
    "Probe",
    "RetrievalOrchestrator",
    "WalletFetchState",
    "WalletFetchStore",
    "clamp_limit",
    "first_success",
]
