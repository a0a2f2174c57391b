"""
Backend WalletFeed — aggregation proxy for Solana wallet activity and token metadata.

Answers "what are this wallet's recent transactions" and "what is this token"
by querying several upstream providers (Solana RPC, Helius, Jupiter, SolanaFM,
Birdeye, Solana token list) with per-wallet freshness caching and rate-limit
cooldown, and relays trade notifications to Telegram.
"""

__version__ = "0.1.0"
