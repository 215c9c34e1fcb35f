"""Periodic report polling toward the ESP32"""
import asyncio
from datetime import datetime
from typing import Optional

from config.logger import logger
from services.websocket_manager import ConnectionManager

REPORT_COMMAND = {"action": "report"}


class PollScheduler:
    """Asks the ESP32 for a fresh report on a fixed cadence.

    Ticks go straight to the device channel; a report command never changes
    state, so nothing is validated or broadcast here. Missed ticks are not
    made up and the loop keeps running with no device connected.
    """

    def __init__(self, manager: ConnectionManager, interval_seconds: float):
        self.manager = manager
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        logger.info(f"[{datetime.now().isoformat()}] Polling ESP32 for updates...")
        return await self.manager.relay_command(dict(REPORT_COMMAND))

    async def _run(self):
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                await self.tick()
        except asyncio.CancelledError:
            pass

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Poll scheduler started (every {self.interval_seconds}s)")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Poll scheduler stopped")
