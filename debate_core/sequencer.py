"""Turn sequencing: who speaks next"""

from typing import Sequence

from .config import ROSTER_SIZE
from .types import TurnPlan


def plan_next_turn(message_count: int, roster: Sequence[str], total_turns: int) -> TurnPlan:
    """Plan the next turn from the number of stored messages

    Speakers rotate through the roster in order, so the same count always
    yields the same speaker.

    Args:
        message_count: Messages already persisted for the debate
        roster: The debate's three persona keys, in speaking order
        total_turns: Configured number of turns

    Returns:
        TurnPlan for turn ``message_count + 1``

    Raises:
        ValueError: If the roster is malformed or no turn is left
    """
    if len(roster) != ROSTER_SIZE or len(set(roster)) != ROSTER_SIZE:
        raise ValueError(f"roster must contain {ROSTER_SIZE} distinct personas: {list(roster)}")
    if not 0 <= message_count < total_turns:
        raise ValueError(f"no turn left: {message_count} of {total_turns} taken")

    turn_number = message_count + 1
    return TurnPlan(
        persona=roster[message_count % ROSTER_SIZE],
        turn_number=turn_number,
        is_last_turn=turn_number >= total_turns,
    )
