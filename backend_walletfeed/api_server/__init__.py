"""
API server package — JSON over HTTP proxy surface.

Exposes wallet activity, token metadata, mint origin and trade notification
routes; delegates to the retrieval engine and the alerts notifier.
"""
