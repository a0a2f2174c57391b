"""
Alerts — trade notification formatting and Telegram dispatch.
"""

from backend_walletfeed.alerts.notifier import BuyEvent, SwapEvent, TradeNotifier

__all__ = ["BuyEvent", "SwapEvent", "TradeNotifier"]
