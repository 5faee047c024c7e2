"""Data classes for AI debate"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DebateStatus(str, Enum):
    """Debate lifecycle; only ever moves ongoing -> completed"""
    ONGOING = "ongoing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Persona:
    """Debater persona definition

    ``voice`` is the instruction block handed to the model. It may contain a
    ``{name}`` placeholder which is filled with the display name.
    """
    key: str
    name: str
    title: str
    description: str
    color: str
    voice: str

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }


@dataclass
class Debate:
    """A topic-scoped debate with a fixed roster and number of turns"""
    topic: str
    total_turns: int
    personas: list[str]
    status: DebateStatus = DebateStatus.ONGOING
    debate_id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def is_ongoing(self) -> bool:
        return self.status == DebateStatus.ONGOING

    def to_dict(self) -> dict:
        return {
            "id": self.debate_id,
            "topic": self.topic,
            "status": self.status.value,
            "totalTurns": self.total_turns,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class Message:
    """A single persisted statement"""
    debate_id: str
    persona: str
    content: str
    turn_number: int
    message_id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "id": self.message_id,
            "persona": self.persona,
            "content": self.content,
            "turnNumber": self.turn_number,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class Vote:
    """An audience vote for one roster member"""
    debate_id: str
    persona: str
    voter: str
    vote_id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class TurnPlan:
    """Who speaks next and whether it is the final turn"""
    persona: str
    turn_number: int
    is_last_turn: bool
