"""
Notification bus

Subscribers are plain callables receiving a `Notification` after the
mutation that produced it has been committed, in commit order.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from ballotbox.core.utils import format_timestamp_with_timezone

logger = logging.getLogger(__name__)

ROUND_CREATED = "round_created"
PARTICIPANT_ADMITTED = "participant_admitted"
PHASE_CHANGED = "phase_changed"
PROPOSAL_SUBMITTED = "proposal_submitted"
VOTE_CAST = "vote_cast"
AUTHORITY_TRANSFERRED = "authority_transferred"


@dataclass
class Notification:
    kind: str
    round_id: int
    payload: Dict[str, Any] = field(default_factory=dict)
    event_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.kind,
            "event_id": self.event_id,
            "round_id": self.round_id,
            "payload": self.payload,
            "timestamp": format_timestamp_with_timezone(self.created_at),
        }


Subscriber = Callable[[Notification], None]


class NotificationBus:
    """Observer list fed by the voting service"""

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Subscriber:
        if subscriber not in self._subscribers:
            self._subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    def publish(self, notification: Notification) -> None:
        logger.debug("publish %s round=%s %s", notification.kind, notification.round_id, notification.payload)
        for subscriber in list(self._subscribers):
            try:
                subscriber(notification)
            except Exception:
                # mutation is already committed
                logger.exception("Subscriber %r failed on %s", subscriber, notification.kind)


class NotificationRecorder:
    """Subscriber keeping every notification it receives"""

    def __init__(self):
        self.notifications: List[Notification] = []

    def __call__(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def kinds(self) -> List[str]:
        return [n.kind for n in self.notifications]

    def of_kind(self, kind: str) -> List[Notification]:
        return [n for n in self.notifications if n.kind == kind]


# Process-wide bus
_bus = None

def get_notification_bus() -> NotificationBus:
    """Return the global notification bus"""
    global _bus
    if _bus is None:
        _bus = NotificationBus()
    return _bus
