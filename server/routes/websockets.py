"""WebSocket routes"""
import asyncio
import json
from datetime import datetime

from config import settings
from config.logger import logger
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from routes.dependencies import get_manager, get_store
from services.relay import handle_command, handle_device_report
from services.websocket_manager import encode_event

router = APIRouter()


_NOT_A_REPORT = object()


def _unwrap_device_message(message):
    """Return the sample carried by a device message.

    The ESP32 may send an ``esp32_message`` envelope or the bare sample.
    Other envelopes yield ``_NOT_A_REPORT``; any other value, null included,
    is a sample.
    """
    if isinstance(message, dict) and "event" in message:
        if message["event"] != "esp32_message":
            return _NOT_A_REPORT
        return message.get("data")
    return message


@router.websocket("/ws")
async def websocket_esp32(websocket: WebSocket):
    """
    WebSocket endpoint for the ESP32 air conditioner controller.
    Receives sensor reports, merges them into the shared state
    and broadcasts the result to dashboards.
    """
    client_host = websocket.client.host if websocket.client else "Unknown"
    store = get_store(websocket)
    manager = get_manager(websocket)
    logger.info(f"ESP32 connection attempt from {client_host}")

    await websocket.accept()
    if manager.is_esp32_connected():
        logger.warning(f"Replacing existing ESP32 connection with {client_host}")
    manager.set_esp32_connection(websocket)
    logger.info(f"ESP32 CONNECTED from {client_host}")

    # Heartbeat task to keep connection alive
    async def heartbeat():
        """Send periodic heartbeat to keep connection alive"""
        try:
            while True:
                await asyncio.sleep(settings.HEARTBEAT_INTERVAL_SECONDS)
                try:
                    await websocket.send_text(encode_event("heartbeat", {"timestamp": datetime.now().isoformat()}))
                except Exception:
                    break
        except asyncio.CancelledError:
            pass

    heartbeat_task = None
    try:
        await manager.broadcast_esp32_status()
        await websocket.send_text(encode_event("welcome", {"status": "connected", "message": "Welcome!"}))
        heartbeat_task = asyncio.create_task(heartbeat())

        while True:
            message = await websocket.receive()

            # Check for disconnect
            if message.get("type") == "websocket.disconnect":
                logger.info(f"ESP32 {client_host} disconnected gracefully")
                break

            # Handle text message (JSON from ESP32)
            if message.get("text") is None:
                continue

            data = message["text"]
            logger.debug(f"Received from ESP32 [{client_host}]: {data[:150]}")

            try:
                payload = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON from {client_host}: {data[:100]}")
                continue

            sample = _unwrap_device_message(payload)
            if sample is _NOT_A_REPORT:
                logger.debug(f"Ignoring ESP32 event: {payload['event']!r}")
                continue

            await handle_device_report(store, manager, sample)

    except WebSocketDisconnect:
        logger.info(f"ESP32 DISCONNECTED from {client_host}")
    except RuntimeError as e:
        if "disconnect" in str(e).lower():
            logger.info(f"ESP32 {client_host} disconnected (runtime)")
        else:
            logger.error(f"ESP32 RuntimeError from {client_host}: {e}")
    except Exception as e:
        logger.error(f"ESP32 ERROR from {client_host}: {type(e).__name__}: {e}", exc_info=True)
    finally:
        if heartbeat_task is not None:
            heartbeat_task.cancel()
            try:
                await heartbeat_task
            except asyncio.CancelledError:
                pass
        if manager.release_esp32_connection(websocket):
            logger.info("ESP32 disconnected")
            # Broadcast ESP32 disconnection status to all dashboards
            await manager.broadcast_esp32_status()


@router.websocket("/ws-dashboard")
async def websocket_dashboard(websocket: WebSocket):
    """
    WebSocket endpoint for Dashboard.
    Pushes state snapshots and forwards control commands to the ESP32.
    """
    client_host = websocket.client.host if websocket.client else "Unknown"
    store = get_store(websocket)
    manager = get_manager(websocket)
    logger.info(f"Dashboard connection attempt from {client_host}")

    try:
        await websocket.accept()

        # Send current state and ESP32 link status immediately
        async with store.lock:
            manager.add_connection(websocket)
            await websocket.send_text(encode_event("web_update", store.snapshot()))
        await websocket.send_text(encode_event("esp32_status", manager.esp32_status()))
        logger.info(f"Dashboard CONNECTED from {client_host} (Total: {manager.get_connection_count()})")

        while True:
            message = await websocket.receive()
            if message.get("type") == "websocket.disconnect":
                logger.info(f"Dashboard {client_host} disconnected gracefully")
                break

            # Only text frames carry JSON events
            if message.get("text") is None:
                continue

            data = message["text"]
            logger.debug(f"Received from Dashboard [{client_host}]: {data}")

            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON from Dashboard {client_host}: {data[:100]}")
                continue

            event = msg.get("event") if isinstance(msg, dict) else None
            if event == "web_command":
                command = msg.get("data")
                logger.info(f"Command from Web (Socket): {command}")
                await handle_command(store, manager, command)
            elif event == "request_state":
                async with store.lock:
                    await websocket.send_text(encode_event("web_update", store.snapshot()))
            else:
                logger.warning(f"Unknown dashboard event from {client_host}: {event!r}")

    except WebSocketDisconnect:
        logger.info(f"Dashboard DISCONNECTED from {client_host}")
    except Exception as e:
        logger.error(f"Dashboard ERROR from {client_host}: {type(e).__name__}: {e}", exc_info=True)
    finally:
        manager.remove_connection(websocket)
        logger.info(f"Active dashboards: {manager.get_connection_count()}")
