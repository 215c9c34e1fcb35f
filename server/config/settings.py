"""Application configuration"""
import logging
import os
from pathlib import Path

_log = logging.getLogger("iot_server")


def _env_number(name: str, default, cast=int, minimum=None):
    """Read a numeric environment variable, falling back to the default"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        _log.warning(f"Invalid value for {name}: {raw!r}, using {default}")
        return default
    if minimum is not None and value < minimum:
        _log.warning(f"{name}={value} is below {minimum}, using {minimum}")
        return minimum
    return value


def _env_log_level(name: str, default: str = "INFO") -> str:
    """Read a logging level name, falling back to the default"""
    level = os.getenv(name, default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        _log.warning(f"Invalid value for {name}: {level!r}, using {default}")
        return default
    return level


# Server settings
PORT = _env_number("PORT", 3000)
APP_ENV = os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development"
IS_PRODUCTION = APP_ENV.lower() == "production"
LOG_LEVEL = _env_log_level("LOG_LEVEL")

# Device polling
POLL_INTERVAL_SECONDS = _env_number("POLL_INTERVAL_SECONDS", 5.0, float)

# In-memory history settings
MAX_HISTORY = _env_number("MAX_HISTORY", 20, minimum=1)
HISTORY_INTERVAL_SECONDS = _env_number("HISTORY_INTERVAL_SECONDS", 3600.0, float, minimum=0.0)

# WebSocket settings
HEARTBEAT_INTERVAL_SECONDS = _env_number("HEARTBEAT_INTERVAL_SECONDS", 30.0, float)

# Dashboard assets
STATIC_DIR = Path(os.getenv("STATIC_DIR", Path(__file__).resolve().parent.parent / "public"))
