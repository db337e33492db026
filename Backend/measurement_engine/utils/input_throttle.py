"""
Tap throttling for the UI boundary
The engine assumes taps arrive serialized; callers debounce with this helper.
"""

import time
from typing import Callable, Optional

from .config import Settings, get_settings

DEFAULT_MIN_INTERVAL_MS = 300


class TapThrottle:
    """Accepts at most one tap per minimum interval"""

    def __init__(self, min_interval_ms: int = DEFAULT_MIN_INTERVAL_MS,
                 clock: Callable[[], float] = time.monotonic):
        self.min_interval = min_interval_ms / 1000.0
        self._clock = clock
        self._last_accepted: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None,
                      clock: Callable[[], float] = time.monotonic) -> "TapThrottle":
        settings = settings or get_settings()
        return cls(settings.TAP_DEBOUNCE_MS, clock=clock)

    def accept(self) -> bool:
        now = self._clock()
        if self._last_accepted is not None and now - self._last_accepted < self.min_interval:
            return False
        self._last_accepted = now
        return True

    def reset(self):
        self._last_accepted = None
