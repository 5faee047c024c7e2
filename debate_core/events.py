"""Turn stream events and their Server-Sent Events encoding"""

import json

from .types import TurnPlan


def chunk_event(content: str) -> dict:
    return {"type": "chunk", "content": content}


def done_event(plan: TurnPlan) -> dict:
    return {
        "type": "done",
        "turnNumber": plan.turn_number,
        "persona": plan.persona,
        "isLastTurn": plan.is_last_turn,
    }


def error_event(message: str) -> dict:
    return {"type": "error", "message": message}


def encode_sse(event: dict) -> str:
    """Render one event as an SSE block: ``data: <json>\\n\\n``"""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
