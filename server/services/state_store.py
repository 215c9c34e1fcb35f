"""In-memory device state store (single source of truth, no persistence)"""
import asyncio
import copy
from collections import deque
from typing import Any, Dict

from config.logger import logger
from models.schemas import DeviceState
from services.commands import validate_command
from services.history import HistoryAdmissionPolicy


class DeviceStateStore:
    """Owns the shared DeviceState and the history admission policy.

    All mutation goes through ``merge_device_report`` and ``apply_command``.
    Callers hold ``lock`` across a mutation and the broadcast that follows
    it, so dashboards receive snapshots in mutation order.
    """

    def __init__(self, max_history: int, history_policy: HistoryAdmissionPolicy):
        self.max_history = max_history
        self.history_policy = history_policy
        self.lock = asyncio.Lock()

        self._state: Dict[str, Any] = DeviceState().model_dump(by_alias=True, exclude={"history", "humidity_history"})
        self._history: deque = deque(maxlen=max_history)
        self._humidity_history: deque = deque(maxlen=max_history)

    def merge_device_report(self, sample: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge a device report and run history admission.

        Returns the snapshot to broadcast; callers always broadcast after a
        merge, whether or not a history point was admitted.
        """
        if not isinstance(sample, dict):
            logger.warning(f"Ignoring non-object device report: {sample!r:.100}")
            return self.snapshot()

        for key, value in sample.items():
            if key == "history":
                self._replace_history(self._history, value)
            elif key == "humidityHistory":
                self._replace_history(self._humidity_history, value)
            else:
                self._state[key] = copy.deepcopy(value)

        temperature = sample.get("temperature")
        if temperature is not None:
            admitted = self.history_policy.admit(
                temperature,
                sample.get("humidity"),
                self._history,
                self._humidity_history,
            )
            if admitted:
                logger.debug(f"History point admitted: {temperature} (total: {len(self._history)})")

        return self.snapshot()

    def apply_command(self, command: Any) -> bool:
        """Apply a dashboard command; True only when the state was mutated"""
        result = validate_command(command)
        if not result.mutates:
            return False
        field, value = result.mutation
        self._state[field] = value
        logger.info(f"State updated: {field} = {value!r}")
        return True

    def snapshot(self) -> Dict[str, Any]:
        """Copy of the current state, safe to hand to one transmission"""
        state = copy.deepcopy(self._state)
        state["history"] = list(self._history)
        state["humidityHistory"] = list(self._humidity_history)
        return state

    @property
    def history(self) -> list:
        return list(self._history)

    @property
    def humidity_history(self) -> list:
        return list(self._humidity_history)

    def _replace_history(self, buffer: deque, values: Any) -> None:
        if not isinstance(values, list):
            logger.warning(f"Ignoring non-list history field: {values!r:.100}")
            return
        buffer.clear()
        buffer.extend(values)
