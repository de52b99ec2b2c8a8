from newsbridge.subscriptions.registry import SubscriptionRegistry

__all__ = ["SubscriptionRegistry"]
