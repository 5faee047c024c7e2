"""Turn advancement: generate, relay and persist one debate turn"""

import asyncio
import logging
import threading
from contextlib import aclosing
from typing import AsyncIterator, Optional

from llm_client import TextGenerator

from .events import chunk_event, done_event, error_event
from .exceptions import ConflictError, DebateError, InvalidStateError, NotFoundError, UpstreamError
from .prompts import build_turn_prompt
from .sequencer import plan_next_turn
from .store import DebateStore
from .types import TurnPlan

logger = logging.getLogger(__name__)

TURN_FAILED_MESSAGE = "AIの応答中にエラーが発生しました。"


class TurnAdvancer:
    """Advances debates one turn at a time

    At most one turn per debate is in flight. The claim is held from the
    precondition checks until the turn's stream ends.
    """

    def __init__(self, store: DebateStore, generator: TextGenerator):
        self.store = store
        self.generator = generator
        self._in_flight: dict[str, object] = {}
        self._lock = threading.Lock()

    def _claim(self, debate_id: str) -> Optional[object]:
        """Take the debate's turn slot; returns a token, or None if taken"""
        with self._lock:
            if debate_id in self._in_flight:
                return None
            token = object()
            self._in_flight[debate_id] = token
            return token

    def _release(self, debate_id: str, token: object) -> None:
        with self._lock:
            if self._in_flight.get(debate_id) is token:
                del self._in_flight[debate_id]

    def is_in_flight(self, debate_id: str) -> bool:
        with self._lock:
            return debate_id in self._in_flight

    @property
    def in_flight_count(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def begin(self, debate_id: str) -> "TurnStream":
        """Validate the debate and prepare its next turn

        Nothing is generated or written here; iterate the returned stream's
        events to run the turn.

        Raises:
            ConflictError: If a turn for this debate is already running
            NotFoundError: If the debate does not exist
            InvalidStateError: If the debate is finished or out of turns
        """
        token = self._claim(debate_id)
        if token is None:
            raise ConflictError("このディベートは現在発言を生成中です。")

        try:
            debate = self.store.get_debate(debate_id)
            if debate is None:
                raise NotFoundError()
            if not debate.is_ongoing:
                raise InvalidStateError("このディベートはすでに終了しています。")

            messages = self.store.list_messages(debate_id)
            if len(messages) >= debate.total_turns:
                raise InvalidStateError("すべてのターンが終了しました。")

            plan = plan_next_turn(len(messages), debate.personas, debate.total_turns)
            prompt = build_turn_prompt(
                plan.persona,
                debate.topic,
                [(m.persona, m.content) for m in messages],
            )
        except BaseException:
            self._release(debate_id, token)
            raise

        logger.info(
            f"Turn {plan.turn_number}/{debate.total_turns} of {debate_id} assigned to {plan.persona}"
        )
        return TurnStream(self, debate_id, plan, prompt, token)


class TurnStream:
    """One claimed turn, ready to be generated"""

    def __init__(
        self,
        advancer: TurnAdvancer,
        debate_id: str,
        plan: TurnPlan,
        prompt: str,
        token: object,
    ):
        self._advancer = advancer
        self._token = token
        self.debate_id = debate_id
        self.plan = plan
        self.prompt = prompt

    def release(self) -> None:
        """Give up the debate's in-flight claim. Safe to call more than once."""
        self._advancer._release(self.debate_id, self._token)

    async def events(self) -> AsyncIterator[dict]:
        """Run the turn, yielding chunk events then a single done or error event

        The message is written only after the full text has been generated.
        If the consumer goes away mid-stream the upstream generation is closed
        and nothing is stored.
        """
        parts: list[str] = []
        try:
            async with aclosing(self._advancer.generator.stream(self.prompt)) as fragments:
                async for text in fragments:
                    parts.append(text)
                    yield chunk_event(text)

            if not parts:
                raise UpstreamError("AIの応答が空でした。")

            await asyncio.to_thread(
                self._advancer.store.append_message,
                self.debate_id,
                self.plan.persona,
                "".join(parts),
                self.plan.turn_number,
                self.plan.is_last_turn,
            )
        except Exception as e:
            logger.exception(f"Turn {self.plan.turn_number} of {self.debate_id} failed")
            message = e.message if isinstance(e, DebateError) else TURN_FAILED_MESSAGE
            yield error_event(message)
            return
        finally:
            self.release()

        logger.info(f"Turn {self.plan.turn_number} of {self.debate_id} saved")
        yield done_event(self.plan)
