"""WebSocket endpoint for live delivery events.

Clients send JSON commands:

    {"action": "join", "delivery_id": 42}
    {"action": "leave", "delivery_id": 42}
    {"action": "join_all"}

Each command is acknowledged with ``{"event": "ack", ...}``; malformed or
unknown commands and binary frames get ``{"event": "error", "detail": ...}``. Delivery events
arrive on the same socket in the order they were published.
"""

import json
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from libs.common.logging import get_logger
from services.delivery_service.realtime.notifier import (
    GLOBAL_GROUP,
    RealtimeNotifier,
    Subscriber,
    delivery_group,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/deliveries", tags=["realtime"])


def _error(detail: str) -> dict[str, Any]:
    return {"event": "error", "detail": detail}


def handle_command(
    notifier: RealtimeNotifier, subscriber: Subscriber, command: Any
) -> dict[str, Any]:
    """Apply one client command to the registry and build the reply frame."""
    if not isinstance(command, dict):
        return _error("Command must be a JSON object")

    action = command.get("action")
    if action == "join_all":
        notifier.join_all(subscriber)
        return {"event": "ack", "action": action, "group": GLOBAL_GROUP}

    if action in ("join", "leave"):
        delivery_id = command.get("delivery_id")
        if isinstance(delivery_id, bool) or not isinstance(delivery_id, int):
            return _error("delivery_id must be an integer")
        if action == "join":
            notifier.join(subscriber, delivery_id)
        else:
            notifier.leave(subscriber, delivery_id)
        return {"event": "ack", "action": action, "group": delivery_group(delivery_id)}

    return _error(f"Unknown action: {action!r}")


@router.websocket("/ws")
async def delivery_events(websocket: WebSocket):
    notifier: RealtimeNotifier = websocket.app.state.notifier
    await websocket.accept()
    # Replies go through the subscriber queue so the socket has one writer.
    subscriber = notifier.connect(websocket.send_json)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                subscriber.offer(_error("Commands must be text frames"))
                continue
            try:
                command = json.loads(raw)
            except ValueError:
                subscriber.offer(_error("Invalid JSON"))
                continue
            subscriber.offer(handle_command(notifier, subscriber, command))
    except WebSocketDisconnect:
        logger.debug("WebSocket %s closed by client", subscriber.id)
    finally:
        await notifier.disconnect(subscriber)
