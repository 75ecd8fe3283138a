"""Change notification for live dashboards.

Processors publish through an injectable notifier after a successful
commit. Delivery is fire-and-forget: a failing or absent channel is logged
and never affects the committed outcome.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Set

from fastapi import WebSocket

from rims.services.inventory_store import InventoryStore
from rims.services.reporting_service import ReportingService

logger = logging.getLogger(__name__)

INVENTORY_CHANNEL = "inventory"
INVENTORY_UPDATE = "inventory_update"


class Notifier(Protocol):
    """Anything that can publish an event payload."""

    def publish(self, event: str, data: Dict[str, Any]) -> None:
        ...


class ConnectionManager:
    """Manages WebSocket connections grouped by channel."""

    def __init__(self):
        self.channel_connections: Dict[str, Set[WebSocket]] = {}
        self.stats = {"total_connections": 0, "messages_broadcast": 0}

    async def connect(self, websocket: WebSocket, channel: str = INVENTORY_CHANNEL):
        """Accept a new WebSocket connection"""
        await websocket.accept()
        self.channel_connections.setdefault(channel, set()).add(websocket)
        self.stats["total_connections"] += 1
        logger.info(f"WebSocket connected: channel={channel}")

    def disconnect(self, websocket: WebSocket, channel: str = INVENTORY_CHANNEL):
        """Remove a WebSocket connection"""
        connections = self.channel_connections.get(channel)
        if connections is not None:
            connections.discard(websocket)
            if not connections:
                del self.channel_connections[channel]
        logger.info(f"WebSocket disconnected: channel={channel}")

    async def broadcast(self, message: Dict[str, Any], channel: str = INVENTORY_CHANNEL):
        """Send a message to every connection on a channel."""
        connections = self.channel_connections.get(channel, set()).copy()

        disconnected: List[WebSocket] = []
        for websocket in connections:
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.debug(f"WebSocket send failed: {e}")
                disconnected.append(websocket)

        for ws in disconnected:
            self.disconnect(ws, channel)

        self.stats["messages_broadcast"] += 1

    def get_connection_count(self, channel: Optional[str] = None) -> int:
        if channel:
            return len(self.channel_connections.get(channel, set()))
        return sum(len(c) for c in self.channel_connections.values())


class WebSocketNotifier:
    """Publishes events to WebSocket subscribers from sync request handlers.

    Handlers run in the threadpool, so broadcasts are handed over to the
    server's event loop, which is bound at application startup.
    """

    def __init__(self, manager: ConnectionManager, channel: str = INVENTORY_CHANNEL):
        self.manager = manager
        self.channel = channel
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def bind_loop(self, loop: Optional[asyncio.AbstractEventLoop]) -> None:
        self._loop = loop

    def publish(self, event: str, data: Dict[str, Any]) -> None:
        message = {
            "event": event,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if self._loop is None or self._loop.is_closed():
            logger.debug(f"No event loop bound, dropping '{event}' notification")
            return
        asyncio.run_coroutine_threadsafe(self.manager.broadcast(message, self.channel), self._loop)


def publish_inventory_update(store: InventoryStore, notifier: Optional[Notifier], reason: str) -> None:
    """Publish the current inventory summary after a committed change.

    Never raises: the change this reports on has already been committed.
    """
    if notifier is None:
        return
    try:
        items = ReportingService(store).inventory_summary()
        notifier.publish(INVENTORY_UPDATE, {"reason": reason, "items": items})
    except Exception as e:
        logger.warning(f"Inventory notification failed ({reason}): {e}")


# Global connection manager and notifier instances
manager = ConnectionManager()
inventory_notifier = WebSocketNotifier(manager)
