"""Debate Client - follow a debate's event stream and keep it advancing"""

from .sse import SSEDecoder, StreamProtocolError
from .throttle import FrameThrottle
from .watcher import DebateWatcher, DebateView, WatcherState

__all__ = [
    "SSEDecoder",
    "StreamProtocolError",
    "FrameThrottle",
    "DebateWatcher",
    "DebateView",
    "WatcherState",
]
