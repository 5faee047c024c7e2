"""Debate Core - Core logic for AI persona debates"""

from .types import Debate, DebateStatus, Message, Persona, TurnPlan, Vote
from .config import PERSONAS, PERSONA_KEYS, ROSTER_SIZE, VALID_TOTAL_TURNS
from .exceptions import (
    DebateError,
    NotFoundError,
    InvalidInputError,
    InvalidStateError,
    ConflictError,
    UpstreamError,
)
from .sequencer import plan_next_turn
from .prompts import build_turn_prompt, build_summary_prompt, parse_summary
from .events import encode_sse
from .store import DebateStore, get_store
from .turns import TurnAdvancer, TurnStream
from .service import DebateService

__all__ = [
    "Debate",
    "DebateStatus",
    "Message",
    "Persona",
    "TurnPlan",
    "Vote",
    "PERSONAS",
    "PERSONA_KEYS",
    "ROSTER_SIZE",
    "VALID_TOTAL_TURNS",
    "DebateError",
    "NotFoundError",
    "InvalidInputError",
    "InvalidStateError",
    "ConflictError",
    "UpstreamError",
    "plan_next_turn",
    "build_turn_prompt",
    "build_summary_prompt",
    "parse_summary",
    "encode_sse",
    "DebateStore",
    "get_store",
    "TurnAdvancer",
    "TurnStream",
    "DebateService",
]
