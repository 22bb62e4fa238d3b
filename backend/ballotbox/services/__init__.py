# Business logic services
from .notifications import NotificationBus, Notification, get_notification_bus
from .websocket_service import WebSocketManager
from .voting_service import VotingService

__all__ = ["NotificationBus", "Notification", "get_notification_bus", "WebSocketManager", "VotingService"]
