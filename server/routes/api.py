"""API routes"""
from datetime import datetime
from typing import Any, Dict

from config import settings
from config.logger import logger
from fastapi import APIRouter, Body, Depends
from fastapi.responses import FileResponse
from models.schemas import ApiInfoResponse, CommandResponse, HealthResponse
from routes.dependencies import manager_dependency, store_dependency
from services.relay import handle_command
from services.state_store import DeviceStateStore
from services.websocket_manager import ConnectionManager

router = APIRouter()

API_INFO = {
    "message": "AC Relay Server",
    "websocket": "/ws",
    "dashboard": "/ws-dashboard",
    "command": "/api/command",
    "status": "running"
}


@router.get("/", include_in_schema=False)
async def home():
    """Dashboard page, or API info when no page is deployed"""
    index = settings.STATIC_DIR / "index.html"
    if index.is_file():
        return FileResponse(index)
    return API_INFO


@router.get("/api", response_model=ApiInfoResponse)
async def api_info():
    """API info endpoint"""
    return API_INFO


@router.get("/health", response_model=HealthResponse)
async def health(manager: ConnectionManager = Depends(manager_dependency)):
    """Health check endpoint"""
    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "active_connections": manager.get_connection_count(),
        "esp32_connected": manager.is_esp32_connected()
    }


@router.get("/api/state")
async def get_state(store: DeviceStateStore = Depends(store_dependency)):
    """Current state snapshot (for HTTP dashboards)"""
    return store.snapshot()


@router.post("/api/command", response_model=CommandResponse)
async def post_command(
    command: Dict[str, Any] = Body(...),
    store: DeviceStateStore = Depends(store_dependency),
    manager: ConnectionManager = Depends(manager_dependency),
):
    """Relay a command to the ESP32; invalid commands still succeed"""
    logger.info(f"Command from Web (REST): {command}")
    await handle_command(store, manager, command)
    return {"status": "success", "data": command}
