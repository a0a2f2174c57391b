"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn backend_walletfeed.api_server.app:app --host 0.0.0.0 --port 5050
"""

from backend_walletfeed.api_server.server import app, create_app

__all__ = ["app", "create_app"]
