"""WebSocket connection manager"""
import json
from datetime import datetime
from typing import Any, Optional, Set

from config.logger import logger
from fastapi import WebSocket


def encode_event(event: str, data: Any = None) -> str:
    """Serialize an outbound event envelope"""
    return json.dumps({"event": event, "data": data})


class ConnectionManager:
    """Registry of dashboard sockets plus the single ESP32 socket"""

    def __init__(self):
        # Active WebSocket connections (dashboards)
        self.active_connections: Set[WebSocket] = set()
        # ESP32 WebSocket connection (only one at a time)
        self.esp32_connection: Optional[WebSocket] = None

    def add_connection(self, websocket: WebSocket):
        """Add a WebSocket connection (dashboard)"""
        self.active_connections.add(websocket)

    def remove_connection(self, websocket: WebSocket):
        """Remove a WebSocket connection (dashboard)"""
        self.active_connections.discard(websocket)

    def set_esp32_connection(self, websocket: Optional[WebSocket]):
        """Set the ESP32 WebSocket connection"""
        self.esp32_connection = websocket

    def release_esp32_connection(self, websocket: WebSocket) -> bool:
        """Clear the ESP32 slot if it still belongs to this socket"""
        if self.esp32_connection is websocket:
            self.esp32_connection = None
            return True
        return False

    def get_connection_count(self) -> int:
        """Get number of active connections"""
        return len(self.active_connections)

    def is_esp32_connected(self) -> bool:
        """Check if ESP32 is connected"""
        return self.esp32_connection is not None

    async def broadcast_to_dashboards(self, message: str):
        """Broadcast message to all connected dashboards"""
        disconnected = set()
        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
            except Exception as e:
                logger.warning(f"Dropping dashboard after failed send: {type(e).__name__}: {e}")
                disconnected.add(connection)

        # Remove disconnected connections
        self.active_connections.difference_update(disconnected)

    async def broadcast_state(self, state: dict):
        """Push a full state snapshot to every dashboard"""
        await self.broadcast_to_dashboards(encode_event("web_update", state))

    async def broadcast_esp32_status(self):
        """Tell dashboards whether the ESP32 is currently linked"""
        await self.broadcast_to_dashboards(encode_event("esp32_status", self.esp32_status()))

    def esp32_status(self) -> dict:
        return {
            "connected": self.is_esp32_connected(),
            "timestamp": datetime.now().isoformat(),
        }

    async def send_to_esp32(self, message: str) -> bool:
        """Send text message to ESP32 if connected"""
        if self.esp32_connection is None:
            return False

        try:
            await self.esp32_connection.send_text(message)
            return True
        except Exception as e:
            logger.warning(f"Send to ESP32 failed: {type(e).__name__}: {e}")
            return False

    async def relay_command(self, command: Any) -> bool:
        """Forward a command to the ESP32 (best effort, no queueing)"""
        return await self.send_to_esp32(encode_event("esp32_command", command))
