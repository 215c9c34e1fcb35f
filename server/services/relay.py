"""Device report and command handling shared by the WebSocket and REST paths"""
from typing import Any

from config.logger import logger
from services.state_store import DeviceStateStore
from services.websocket_manager import ConnectionManager


async def handle_device_report(store: DeviceStateStore, manager: ConnectionManager, sample: Any) -> dict:
    """Merge an ESP32 report and broadcast the resulting state"""
    async with store.lock:
        snapshot = store.merge_device_report(sample)
        await manager.broadcast_state(snapshot)
    return snapshot


async def handle_command(store: DeviceStateStore, manager: ConnectionManager, command: Any) -> bool:
    """Relay a dashboard command to the ESP32 and apply it to the shared state.

    The relay happens whether or not the command is valid for the state
    model. Dashboards get a broadcast only when the state actually changed.
    Returns True when the state was updated.
    """
    async with store.lock:
        if await manager.relay_command(command):
            logger.info(f"📤 → ESP32: {command}")
        else:
            logger.warning("❌ ESP32 not connected, command not relayed")

        updated = store.apply_command(command)
        if updated:
            await manager.broadcast_state(store.snapshot())
    return updated
