"""
WebSocket Manager - Handles real-time connections and broadcasts.

Every connected client (browser canvas, agents) is told when the scene
changes or a table is activated, and re-fetches what it needs.
"""
import asyncio
import json
import logging
from typing import Optional, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketManager:
    """
    Manages WebSocket connections and broadcasts.

    Failed sends drop the connection instead of raising.
    """

    def __init__(self):
        self._connections: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        """Accept and register a new WebSocket connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)
        logger.info("WebSocket connected. Total connections: %d", len(self._connections))

    async def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection."""
        async with self._lock:
            self._connections.discard(websocket)
        logger.info("WebSocket disconnected. Total connections: %d", len(self._connections))

    async def broadcast(self, message: dict):
        """Send a message to all connected clients."""
        if not self._connections:
            return

        # Serialize once for all clients
        message_text = json.dumps(message)
        failed: Set[WebSocket] = set()

        async with self._lock:
            for websocket in self._connections:
                try:
                    await websocket.send_text(message_text)
                except Exception as exc:
                    logger.debug("Dropping WebSocket after failed send: %s", exc)
                    failed.add(websocket)

            self._connections -= failed

    async def notify_scene_updated(self, selected_table: Optional[str] = None):
        """Clients should fetch the latest scene via GET /api/scene."""
        await self.broadcast({
            "type": "scene_updated",
            "selected_table": selected_table
        })

    async def notify_table_selected(self, table: str, editor_query: Optional[str] = None):
        await self.broadcast({
            "type": "table_selected",
            "table": table,
            "editor_query": editor_query
        })

    @property
    def connection_count(self) -> int:
        """Get the number of active connections."""
        return len(self._connections)


# Global instance
ws_manager = WebSocketManager()
