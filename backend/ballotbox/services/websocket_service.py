"""
WebSocket connection management service
"""

import asyncio
import json
import logging
from fastapi import WebSocket
from typing import Dict, List, Optional, Set
from ballotbox.services.notifications import Notification

logger = logging.getLogger(__name__)

ALL_ROUNDS = None

class WebSocketManager:
    """Fans ledger notifications out to WebSocket observers"""

    def __init__(self):
        # observers keyed by the round they follow; None follows every round
        self.connections: Dict[Optional[int], List[WebSocket]] = {}
        # pending broadcasts, held until done
        self._tasks: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket, round_id: Optional[int] = ALL_ROUNDS):
        """Accept an observer connection"""
        await websocket.accept()
        observers = self.connections.setdefault(round_id, [])

        # avoid duplicate registration
        if websocket not in observers:
            observers.append(websocket)
            logger.info("Observer joined (round=%s), connections: %d", round_id, len(observers))

    def disconnect(self, websocket: WebSocket, round_id: Optional[int] = ALL_ROUNDS):
        """Drop an observer connection"""
        observers = self.connections.get(round_id, [])
        if websocket in observers:
            observers.remove(websocket)
            logger.info("Observer left (round=%s), connections: %d", round_id, len(observers))

    def connection_count(self) -> int:
        return sum(len(observers) for observers in self.connections.values())

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send a message to one observer"""
        try:
            await websocket.send_text(json.dumps(message, ensure_ascii=False))
        except Exception as e:
            logger.warning("Failed to send personal message: %s", e)

    async def broadcast(self, message: dict, round_id: int):
        """Send a message to observers of `round_id` and of every round"""
        targets = list(self.connections.get(round_id, [])) + list(self.connections.get(ALL_ROUNDS, []))
        if not targets:
            return

        message_text = json.dumps(message, ensure_ascii=False)
        failed_connections = []

        for connection in targets:
            try:
                await connection.send_text(message_text)
            except Exception as e:
                logger.warning("Broadcast failed: %s", e)
                failed_connections.append(connection)

        # remove dead connections
        for failed_connection in failed_connections:
            for observers in self.connections.values():
                if failed_connection in observers:
                    observers.remove(failed_connection)

        logger.debug(
            "Broadcast %s: %d ok, %d failed",
            message.get('type', 'unknown'), len(targets) - len(failed_connections), len(failed_connections)
        )

    def notify(self, notification: Notification) -> None:
        """Notification bus subscriber scheduling a broadcast"""
        if not self.connection_count():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, dropping %s broadcast", notification.kind)
            return
        task = loop.create_task(self.broadcast(notification.to_message(), notification.round_id))
        self._tasks.add(task)
        task.add_done_callback(self._finish_task)

    def _finish_task(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Broadcast task failed", exc_info=task.exception())
