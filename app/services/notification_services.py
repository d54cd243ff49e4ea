import asyncio
from typing import Any, Set
from bson import ObjectId
from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder


from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


class NotificationService:
    """
    Pushes admin notifications (new orders, new messages, listing changes) to every
    connected WebSocket client.
    """

    def __init__(self):
        self.connections: Set[WebSocket] = set()
        self._pending: Set[asyncio.Task] = set()


    async def connect(self, websocket: WebSocket) -> None:
        """
        Accept a WebSocket client and register it for broadcasts.

        Args:
            websocket: Incoming connection
        """
        await websocket.accept()
        self.connections.add(websocket)
        logger.info(f"Notification client connected ({len(self.connections)} active)")


    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a WebSocket client."""
        self.connections.discard(websocket)
        logger.info(f"Notification client disconnected ({len(self.connections)} active)")


    async def broadcast(self, event: str, payload: Any) -> int:
        """
        Send an event to every connected client. Clients that fail are dropped.

        Args:
            event: Event name such as ``carCreated`` or ``newOrder``
            payload: JSON serializable data

        Returns:
            Number of clients that received the event
        """
        message = {
            "event": event,
            "data": jsonable_encoder(payload, custom_encoder={ObjectId: str}),
        }
        delivered = 0
        for websocket in list(self.connections):
            try:
                await websocket.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping notification client after send failure: {e}")
                self.disconnect(websocket)
        return delivered


    def publish(self, event: str, payload: Any) -> None:
        """
        Schedule a broadcast without waiting for it. Failures are only logged.

        Args:
            event: Event name
            payload: JSON serializable data
        """
        if not self.connections:
            return
        try:
            task = asyncio.get_running_loop().create_task(self.broadcast(event, payload))
        except RuntimeError:
            logger.warning(f"No running event loop, notification {event} skipped")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


notification_service = NotificationService()
