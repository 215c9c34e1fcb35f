"""Application lifespan management"""
from contextlib import asynccontextmanager

from config import settings
from config.logger import logger
from services.history import HistoryAdmissionPolicy
from services.poll_scheduler import PollScheduler
from services.state_store import DeviceStateStore
from services.websocket_manager import ConnectionManager


@asynccontextmanager
async def lifespan(app):
    """
    Build the shared state, connection registry and poll scheduler,
    and tie them to the application lifetime.
    """
    # Startup
    logger.info("Starting application...")
    app.state.store = DeviceStateStore(
        max_history=settings.MAX_HISTORY,
        history_policy=HistoryAdmissionPolicy(settings.HISTORY_INTERVAL_SECONDS),
    )
    app.state.manager = ConnectionManager()
    app.state.scheduler = PollScheduler(app.state.manager, settings.POLL_INTERVAL_SECONDS)
    app.state.scheduler.start()

    logger.info("-------------------------------------------")
    logger.info(f"🚀 Server started in {'PRODUCTION' if settings.IS_PRODUCTION else 'DEVELOPMENT'} mode")
    logger.info(f"🔌 Listening on port {settings.PORT}")
    logger.info(
        f"History: {settings.MAX_HISTORY} points, one every {settings.HISTORY_INTERVAL_SECONDS}s"
    )
    if not settings.IS_PRODUCTION:
        logger.info("💻 Local IP for ESP32: use 'ipconfig' (Win) or 'ifconfig' (Mac) to find it.")
    logger.info("-------------------------------------------")

    yield  # Application is running

    # Shutdown
    logger.info("Shutting down application...")
    await app.state.scheduler.stop()
    logger.info("Application shut down successfully")
