"""Prompt generation for AI debate"""

import json
import re
from typing import Sequence

from .config import FIRST_SPEAKER_PLACEHOLDER, PERSONAS
from .exceptions import UpstreamError

_CODE_FENCE = re.compile(r"```(?:json)?")


def render_history(history: Sequence[tuple[str, str]], separator: str = "\n") -> str:
    """Render (persona key, content) pairs as "<display name>: <content>" lines"""
    return separator.join(
        f"{PERSONAS[persona].name}: {content}" for persona, content in history
    )


def build_turn_prompt(persona_key: str, topic: str, history: Sequence[tuple[str, str]]) -> str:
    """Create the prompt for one debate turn

    The whole history is included verbatim, oldest first.

    Args:
        persona_key: Key of the persona who speaks this turn
        topic: The debate topic
        history: Prior (persona key, content) pairs, oldest first

    Returns:
        Prompt string
    """
    persona = PERSONAS[persona_key]
    voice = persona.voice.format(name=persona.name)
    history_text = render_history(history) if history else FIRST_SPEAKER_PLACEHOLDER

    return f"""{voice}

【ディベートのテーマ】
{topic}

【これまでの会話】
{history_text}

上の会話の続きとして、あなたのキャラクターらしく発言して。
- 必ず日本語のタメ口で書くこと。
- 3〜5文で短くインパクトのある発言にすること。
- 直前までの発言に具体的に触れて反応すること。
- 自分の名前や役割は絶対に名乗らないこと。言いたいことだけをすぐに書くこと。"""


def build_summary_prompt(topic: str, roster: Sequence[str], history: Sequence[tuple[str, str]]) -> str:
    """Create the prompt asking for a per-persona summary as JSON

    Args:
        topic: The debate topic
        roster: Persona keys that took part
        history: All (persona key, content) pairs, oldest first

    Returns:
        Prompt string
    """
    template = json.dumps(
        {PERSONAS[key].name: "..." for key in roster},
        ensure_ascii=False,
        indent=2,
    )
    history_text = render_history(history, separator="\n\n")

    return f"""以下は「{topic}」をテーマに行われたAIディベートです。

{history_text}

このディベートで各参加者が主張した核心を、次のJSON形式で要約して。
それぞれの要約は2〜3文、タメ口で書くこと。

{template}

JSONだけを出力し、それ以外のテキストは絶対に含めないこと。"""


def parse_summary(raw: str) -> dict[str, str]:
    """Parse the model's summary output

    Code fences around the JSON are removed first. Anything that is not a JSON
    object of strings is reported, not repaired.

    Raises:
        UpstreamError: If the output is not a JSON object with string values
    """
    text = _CODE_FENCE.sub("", raw).strip()
    try:
        summary = json.loads(text)
    except json.JSONDecodeError as e:
        raise UpstreamError("要約の生成に失敗しました。") from e

    if not isinstance(summary, dict) or not all(isinstance(v, str) for v in summary.values()):
        raise UpstreamError("要約の生成に失敗しました。")
    return summary
