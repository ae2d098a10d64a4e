"""NotificationBus module."""

from .bus import IAgent, INotificationBus, NotificationBus

__all__ = ["IAgent", "INotificationBus", "NotificationBus"]
