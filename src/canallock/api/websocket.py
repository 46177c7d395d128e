"""WebSocket manager for real-time updates."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any

from quart.wrappers import Websocket

from .schemas import WebSocketMessage

logger = logging.getLogger(__name__)


class WebSocketManager:
    """Manages WebSocket connections and broadcasts.

    Handles multiple client connections and pushes lock snapshots, events
    and errors to all connected clients.
    """

    def __init__(self) -> None:
        self._connections: list[Websocket] = []
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        """Number of active WebSocket connections."""
        return len(self._connections)

    async def connect(self, websocket: Websocket) -> None:
        """Register a new WebSocket connection."""
        async with self._lock:
            self._connections.append(websocket)
        logger.info(
            "WebSocket connected. Total connections: %d",
            len(self._connections),
        )

    async def disconnect(self, websocket: Websocket) -> None:
        """Remove a WebSocket connection."""
        async with self._lock:
            if websocket in self._connections:
                self._connections.remove(websocket)
        logger.info(
            "WebSocket disconnected. Total connections: %d",
            len(self._connections),
        )

    @staticmethod
    def encode(message_type: str, data: dict[str, Any]) -> str:
        """Serialize a message to JSON."""
        message = WebSocketMessage(
            type=message_type,
            data=data,
            timestamp=datetime.now(),
        )
        message_dict = asdict(message)
        message_dict["timestamp"] = message_dict["timestamp"].isoformat()
        return json.dumps(message_dict)

    async def broadcast(self, message_type: str, data: dict[str, Any]) -> None:
        """Broadcast message to all connected clients.

        Automatically removes clients that fail to receive the message.

        Args:
            message_type: Type of message (e.g., "snapshot").
            data: Message data dictionary.
        """
        if not self._connections:
            return

        json_message = self.encode(message_type, data)

        async with self._lock:
            disconnected: list[Websocket] = []
            for connection in self._connections:
                try:
                    await connection.send(json_message)
                except Exception as e:
                    logger.warning("Failed to send to WebSocket: %s", e)
                    disconnected.append(connection)

            for conn in disconnected:
                self._connections.remove(conn)

    async def broadcast_snapshot(self, snapshot: dict[str, Any]) -> None:
        """Broadcast a lock snapshot to all clients."""
        await self.broadcast("snapshot", snapshot)

    async def broadcast_event(self, event: dict[str, Any]) -> None:
        """Broadcast a serialized session event to all clients."""
        await self.broadcast("event", event)

    async def broadcast_error(
        self,
        message: str,
        error_type: str | None = None,
    ) -> None:
        """Broadcast error message to all clients."""
        data: dict[str, Any] = {"message": message}
        if error_type:
            data["error_type"] = error_type
        await self.broadcast("error", data)
