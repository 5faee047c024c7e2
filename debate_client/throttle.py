"""Frame-rate throttling for streamed text redraws"""

import asyncio
from typing import Any, Callable, Optional

FRAME_INTERVAL = 1 / 60


class FrameThrottle:
    """Coalesce rapid updates into at most one callback per frame

    The callback always receives the most recent value pushed.
    """

    def __init__(self, callback: Callable[[Any], None], interval: float = FRAME_INTERVAL):
        self._callback = callback
        self._interval = interval
        self._pending: Any = None
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def scheduled(self) -> bool:
        return self._handle is not None

    def push(self, value: Any) -> None:
        """Queue ``value`` for the next frame"""
        self._pending = value
        if self._handle is not None:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._interval, self._fire)

    def reset(self, value: Any) -> None:
        """Drop any queued frame and deliver ``value`` right away"""
        self.cancel()
        self._pending = value
        self._callback(value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback(self._pending)
