"""Debate operations used by the API layer"""

import logging
import random
from typing import Optional

from llm_client import LLMError, TextGenerator

from .config import (
    DEFAULT_PERSONA_SAMPLING,
    PERSONA_KEYS,
    PERSONAS,
    ROSTER_SIZE,
    VALID_TOTAL_TURNS,
)
from .exceptions import InvalidInputError, InvalidStateError, NotFoundError, UpstreamError
from .prompts import build_summary_prompt, parse_summary
from .store import DebateStore
from .turns import TurnAdvancer, TurnStream
from .types import Debate, DebateStatus

logger = logging.getLogger(__name__)


class DebateService:
    """Creates debates, runs turns, summarizes and collects votes"""

    def __init__(
        self,
        store: DebateStore,
        generator: TextGenerator,
        rng: Optional[random.Random] = None,
        sampling: str = DEFAULT_PERSONA_SAMPLING,
    ):
        self.store = store
        self.generator = generator
        self.turns = TurnAdvancer(store, generator)
        self._rng = rng or random.Random()
        self._sampling = sampling

    def _require_debate(self, debate_id: str) -> Debate:
        debate = self.store.get_debate(debate_id)
        if debate is None:
            raise NotFoundError()
        return debate

    def _pick_roster(self) -> list[str]:
        if self._sampling == "fixed":
            return PERSONA_KEYS[:ROSTER_SIZE]
        return self._rng.sample(PERSONA_KEYS, ROSTER_SIZE)

    def list_personas(self) -> list[dict]:
        """The whole persona pool"""
        return [PERSONAS[key].to_dict() for key in PERSONA_KEYS]

    def create_debate(self, topic: str, total_turns: int) -> Debate:
        """Create a new ongoing debate with a three-persona roster

        Raises:
            InvalidInputError: If the topic is blank or the turn count is not allowed
        """
        topic = (topic or "").strip()
        if not topic:
            raise InvalidInputError("ディベートのテーマを入力してください。")
        if total_turns not in VALID_TOTAL_TURNS:
            allowed = "、".join(str(n) for n in VALID_TOTAL_TURNS)
            raise InvalidInputError(f"ターン数は{allowed}のいずれかにしてください。")

        roster = self._pick_roster()
        debate = self.store.create_debate(topic, total_turns, roster)
        logger.info(f"Debate {debate.debate_id} created with personas {roster}")
        return debate

    def get_snapshot(self, debate_id: str) -> dict:
        """Debate state with its full message list

        ``currentTurn`` is the number of stored messages.
        """
        debate = self._require_debate(debate_id)
        messages = self.store.list_messages(debate_id)
        return {
            **debate.to_dict(),
            "personas": [PERSONAS[key].to_dict() for key in debate.personas],
            "currentTurn": len(messages),
            "messages": [m.to_dict() for m in messages],
        }

    def begin_turn(self, debate_id: str) -> TurnStream:
        """Claim and prepare the next turn of a debate"""
        return self.turns.begin(debate_id)

    async def summarize(self, debate_id: str) -> dict[str, str]:
        """Summarize each persona's position in a completed debate

        Returns:
            Mapping of persona display name to summary text

        Raises:
            NotFoundError: If the debate does not exist
            InvalidStateError: If the debate is still ongoing
            UpstreamError: If generation fails or the output is not valid JSON
        """
        debate = self._require_debate(debate_id)
        if debate.status != DebateStatus.COMPLETED:
            raise InvalidStateError("ディベートはまだ進行中です。")

        messages = self.store.list_messages(debate_id)
        prompt = build_summary_prompt(
            debate.topic,
            debate.personas,
            [(m.persona, m.content) for m in messages],
        )

        try:
            raw = await self.generator.generate(prompt)
        except LLMError as e:
            logger.error(f"Summary generation failed for {debate_id}: {e}")
            raise UpstreamError("要約の生成に失敗しました。") from e

        try:
            return parse_summary(raw)
        except UpstreamError:
            logger.error(f"Unparseable summary for {debate_id}: {raw!r}")
            raise

    def cast_vote(self, debate_id: str, persona: str, voter: str) -> dict:
        """Record one vote and return the current tally

        Raises:
            InvalidInputError: If the persona is not on the debate's roster
            NotFoundError: If the debate does not exist
            InvalidStateError: If the debate is not completed yet
            ConflictError: If this voter already voted
        """
        if persona not in PERSONAS:
            raise InvalidInputError("無効なペルソナです。")

        debate = self._require_debate(debate_id)
        if persona not in debate.personas:
            raise InvalidInputError("無効なペルソナです。")
        if debate.status != DebateStatus.COMPLETED:
            raise InvalidStateError("ディベートが終了してから投票できます。")

        self.store.add_vote(debate_id, persona, voter)
        counts = self.store.count_votes(debate_id)

        return {
            "votes": {key: counts.get(key, 0) for key in debate.personas},
            "myVote": persona,
        }
