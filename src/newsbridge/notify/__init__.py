"""New-article detection and subscriber broadcast."""

from newsbridge.notify.broadcaster import Broadcaster
from newsbridge.notify.poller import NewsPoller, PollerState

__all__ = [
    "Broadcaster",
    "NewsPoller",
    "PollerState",
]
