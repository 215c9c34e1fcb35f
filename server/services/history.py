"""Time-based admission of samples into the rolling histories"""
import time
from collections import deque
from enum import Enum
from typing import Callable, Optional


class AdmissionState(str, Enum):
    AWAITING_FIRST_SAMPLE = "awaiting_first_sample"
    THROTTLED = "throttled"


class HistoryAdmissionPolicy:
    """Admit at most one history point per interval.

    Current values are updated on every report; only the history is throttled.
    The interval is measured from the last admission, not from the last report.
    """

    def __init__(self, interval_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._interval = float(interval_seconds)
        self._clock = clock
        self._last_admitted_at: Optional[float] = None

    @property
    def state(self) -> AdmissionState:
        if self._last_admitted_at is None:
            return AdmissionState.AWAITING_FIRST_SAMPLE
        return AdmissionState.THROTTLED

    @property
    def last_admitted_at(self) -> Optional[float]:
        return self._last_admitted_at

    def should_admit(self, now: float) -> bool:
        if self._last_admitted_at is None:
            return True
        return now - self._last_admitted_at >= self._interval

    def admit(self, temperature, humidity, history: deque, humidity_history: deque) -> bool:
        """Append the sample if the interval has elapsed; returns True on admission"""
        now = self._clock()
        if not self.should_admit(now):
            return False
        # deque(maxlen=...) evicts the oldest entry on append
        history.append(temperature)
        if humidity is not None:
            humidity_history.append(humidity)
        self._last_admitted_at = now
        return True
