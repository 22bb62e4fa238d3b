"""
WebSocket API routes
"""

import json
import logging
from typing import Optional
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from ballotbox.api.deps import short_session
from ballotbox.services.notifications import get_notification_bus
from ballotbox.services.voting_service import VotingService
from ballotbox.services.websocket_service import WebSocketManager

logger = logging.getLogger(__name__)

router = APIRouter()

# global WebSocket connection manager
_manager = None

def get_websocket_manager():
    """Return the global WebSocket manager, subscribed to the notification bus"""
    global _manager
    if _manager is None:
        _manager = WebSocketManager()
        get_notification_bus().subscribe(_manager.notify)
    return _manager

@router.websocket("/events")
async def websocket_events_endpoint(
    websocket: WebSocket,
    round_id: Optional[int] = None
):
    """Live ledger notifications; `round_id` narrows them to one round"""
    manager = get_websocket_manager()
    await manager.connect(websocket, round_id)

    try:
        # greet with the current round so observers can sync
        with short_session(websocket.app) as db:
            current = VotingService(db).current_round_view()

        await manager.send_personal_message({
            "type": "connected",
            "round_id": round_id,
            "current_round": current.model_dump(mode="json"),
        }, websocket)

        while True:
            data = await websocket.receive_text()
            try:
                message_data = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON from observer: %s", data)
                continue

            if message_data.get("type") == "ping":
                await manager.send_personal_message({
                    "type": "pong",
                    "timestamp": message_data.get("timestamp")
                }, websocket)

    except WebSocketDisconnect:
        manager.disconnect(websocket, round_id)
