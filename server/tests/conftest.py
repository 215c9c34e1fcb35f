import pytest
from config import settings
from fastapi.testclient import TestClient
from services.history import HistoryAdmissionPolicy
from services.state_store import DeviceStateStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class RecordingManager:
    """Stands in for ConnectionManager and records what would be sent"""

    def __init__(self, esp32_connected: bool = True):
        self.esp32_connected = esp32_connected
        self.relayed = []
        self.broadcasts = []

    async def relay_command(self, command) -> bool:
        if not self.esp32_connected:
            return False
        self.relayed.append(command)
        return True

    async def broadcast_state(self, state: dict):
        self.broadcasts.append(state)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> DeviceStateStore:
    return DeviceStateStore(max_history=3, history_policy=HistoryAdmissionPolicy(60, clock=clock))


@pytest.fixture
def manager() -> RecordingManager:
    return RecordingManager()


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "POLL_INTERVAL_SECONDS", 3600)
    monkeypatch.setattr(settings, "HISTORY_INTERVAL_SECONDS", 3600)
    monkeypatch.setattr(settings, "HEARTBEAT_INTERVAL_SECONDS", 3600)
    monkeypatch.setattr(settings, "MAX_HISTORY", 3)

    from app import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def offline_manager() -> RecordingManager:
    return RecordingManager(esp32_connected=False)
