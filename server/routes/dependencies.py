"""Accessors for the lifespan-owned services"""
from fastapi import Request
from services.state_store import DeviceStateStore
from services.websocket_manager import ConnectionManager
from starlette.requests import HTTPConnection


def get_store(connection: HTTPConnection) -> DeviceStateStore:
    """Get the shared state store (HTTP or WebSocket)"""
    return connection.app.state.store


def get_manager(connection: HTTPConnection) -> ConnectionManager:
    """Get the connection manager (HTTP or WebSocket)"""
    return connection.app.state.manager


def store_dependency(request: Request) -> DeviceStateStore:
    """FastAPI dependency for the state store"""
    return get_store(request)


def manager_dependency(request: Request) -> ConnectionManager:
    """FastAPI dependency for the connection manager"""
    return get_manager(request)
