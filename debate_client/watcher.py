"""Client-side state machine that watches a debate and keeps it moving"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import httpx

from .sse import SSEDecoder, StreamProtocolError
from .throttle import FRAME_INTERVAL, FrameThrottle

logger = logging.getLogger(__name__)


class WatcherState(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    ADVANCING = "advancing"
    TERMINAL = "terminal"
    FAILED = "failed"


@dataclass
class DebateView:
    """Client copy of a debate snapshot"""
    debate_id: str
    topic: str
    status: str
    total_turns: int
    personas: list[str]
    current_turn: int
    messages: list[dict] = field(default_factory=list)

    @classmethod
    def from_snapshot(cls, data: dict) -> "DebateView":
        return cls(
            debate_id=data["id"],
            topic=data["topic"],
            status=data["status"],
            total_turns=data["totalTurns"],
            personas=[p["key"] for p in data["personas"]],
            current_turn=data["currentTurn"],
            messages=list(data["messages"]),
        )

    @property
    def is_finished(self) -> bool:
        return self.status != "ongoing" or self.current_turn >= self.total_turns

    @property
    def next_persona(self) -> str:
        return self.personas[self.current_turn % len(self.personas)]


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("message") or f"HTTP {response.status_code}"
    except ValueError:
        return f"HTTP {response.status_code}"


class DebateWatcher:
    """Loads a debate and requests turns until it is over

    Only one turn request is ever in flight; ``trigger`` is the single entry
    point and refuses to start while a turn task is running. Each completed
    turn re-triggers the next one automatically.

    Callbacks:
        on_text(persona, text): streamed text so far, at most once per frame
        on_message(message): a turn was saved
        on_state(state): state transitions
    """

    def __init__(
        self,
        debate_id: str,
        client: httpx.AsyncClient,
        on_text: Optional[Callable[[Optional[str], str], None]] = None,
        on_message: Optional[Callable[[dict], None]] = None,
        on_state: Optional[Callable[[WatcherState], None]] = None,
        frame_interval: float = FRAME_INTERVAL,
    ):
        self.debate_id = debate_id
        self.client = client
        self.on_text = on_text
        self.on_message = on_message
        self.on_state = on_state

        self.state = WatcherState.IDLE
        self.view: Optional[DebateView] = None
        self.error: Optional[str] = None
        self.streaming_text = ""
        self.streaming_persona: Optional[str] = None

        self._turn_task: Optional[asyncio.Task] = None
        self._stopped = False
        self._settled = asyncio.Event()
        self._throttle = FrameThrottle(self._emit_text, frame_interval)

    @property
    def in_flight(self) -> bool:
        return self._turn_task is not None and not self._turn_task.done()

    def _set_state(self, state: WatcherState) -> None:
        self.state = state
        if self.on_state:
            self.on_state(state)
        if state in (WatcherState.TERMINAL, WatcherState.FAILED):
            self._settled.set()

    def _emit_text(self, text: str) -> None:
        if self.on_text:
            self.on_text(self.streaming_persona, text)

    def _fail(self, message: str) -> None:
        logger.warning(f"Debate {self.debate_id} stopped: {message}")
        self.error = message
        self.streaming_persona = None
        self.streaming_text = ""
        self._throttle.cancel()
        self._set_state(WatcherState.FAILED)

    async def load(self) -> None:
        """Fetch the debate snapshot"""
        try:
            response = await self.client.get(f"/debate/{self.debate_id}")
        except httpx.TransportError as e:
            logger.debug(f"Transport error loading {self.debate_id}: {e!r}")
            self._fail("サーバーとの接続が切れました。")
            return

        if response.status_code != 200:
            self._fail(_error_message(response))
            return

        self.view = DebateView.from_snapshot(response.json()["data"])
        self._set_state(WatcherState.TERMINAL if self.view.is_finished else WatcherState.LOADED)

    def trigger(self) -> Optional[asyncio.Task]:
        """Start the next turn if the debate allows it and none is running

        Returns:
            The turn task, or None if nothing was started
        """
        if self._stopped or self.in_flight:
            return None
        if self.state != WatcherState.LOADED or self.view is None or self.view.is_finished:
            return None

        self._set_state(WatcherState.ADVANCING)
        task = asyncio.create_task(self._advance())
        task.add_done_callback(self._on_turn_finished)
        self._turn_task = task
        return task

    def _on_turn_finished(self, task: asyncio.Task) -> None:
        if self._turn_task is task:
            self._turn_task = None
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            self._fail(str(error) or type(error).__name__)
            return

        if self.state == WatcherState.LOADED:
            self.trigger()

    async def _advance(self) -> None:
        decoder = SSEDecoder()
        self.streaming_persona = self.view.next_persona
        self.streaming_text = ""
        self._throttle.reset("")

        try:
            async with self.client.stream("POST", f"/debate/{self.debate_id}/next") as response:
                if response.status_code != 200:
                    await response.aread()
                    self._fail(_error_message(response))
                    return

                async for data in response.aiter_bytes():
                    for event in decoder.feed(data):
                        if self._apply(event):
                            return
                for event in decoder.flush():
                    if self._apply(event):
                        return
        except httpx.TransportError as e:
            logger.debug(f"Transport error on {self.debate_id}: {e!r}")
            self._fail("サーバーとの接続が切れました。")
            return
        except StreamProtocolError as e:
            logger.debug(str(e))
            self._fail("サーバーから不正なデータを受信しました。")
            return

        self._fail("発言の途中でストリームが終了しました。")

    def _apply(self, event: dict) -> bool:
        """Apply one event; True once the turn is over"""
        kind = event.get("type")

        if kind == "chunk":
            self.streaming_text += event.get("content", "")
            self._throttle.push(self.streaming_text)
            return False

        if kind == "done":
            message = {
                "id": str(uuid.uuid4()),
                "persona": event["persona"],
                "content": self.streaming_text,
                "turnNumber": event["turnNumber"],
            }
            self.view.messages.append(message)
            self.view.current_turn = event["turnNumber"]
            self.view.status = "completed" if event["isLastTurn"] else "ongoing"

            self.streaming_text = ""
            self.streaming_persona = None
            self._throttle.reset("")
            if self.on_message:
                self.on_message(message)
            self._set_state(WatcherState.TERMINAL if self.view.is_finished else WatcherState.LOADED)
            return True

        if kind == "error":
            self._fail(event.get("message") or "不明なエラーが発生しました。")
            return True

        return False

    async def run(self) -> WatcherState:
        """Load the debate and follow it until it finishes, fails or is stopped"""
        if self.view is None:
            await self.load()
        self.trigger()
        await self._settled.wait()
        return self.state

    async def stop(self) -> None:
        """Cancel any in-flight turn. Cancellation is not reported as an error."""
        self._stopped = True
        task = self._turn_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._throttle.cancel()
        self.streaming_text = ""
        self.streaming_persona = None
        if self.state not in (WatcherState.TERMINAL, WatcherState.FAILED):
            self._set_state(WatcherState.IDLE)
        self._settled.set()
