"""Tests for prompt composition and summary parsing."""

import pytest

from debate_core import PERSONAS, UpstreamError, build_summary_prompt, build_turn_prompt, parse_summary
from debate_core.config import FIRST_SPEAKER_PLACEHOLDER


def test_first_turn_prompt_uses_placeholder() -> None:
    prompt = build_turn_prompt("A", "週休3日制", [])

    assert FIRST_SPEAKER_PLACEHOLDER in prompt
    assert "週休3日制" in prompt
    assert PERSONAS["A"].name in prompt
    assert "{name}" not in prompt


def test_history_is_rendered_in_order_with_display_names() -> None:
    history = [("A", "一つ目"), ("B", "二つ目"), ("C", "三つ目")]
    prompt = build_turn_prompt("A", "テーマ", history)

    expected = "\n".join(
        f"{PERSONAS[key].name}: {text}" for key, text in history
    )
    assert expected in prompt
    assert FIRST_SPEAKER_PLACEHOLDER not in prompt


def test_voice_block_follows_speaker() -> None:
    prompt_a = build_turn_prompt("A", "テーマ", [])
    prompt_c = build_turn_prompt("C", "テーマ", [])

    assert prompt_a.startswith(PERSONAS["A"].voice.format(name=PERSONAS["A"].name))
    assert prompt_c.startswith(PERSONAS["C"].voice.format(name=PERSONAS["C"].name))
    assert "3〜5文" in prompt_a


def test_long_history_is_not_truncated() -> None:
    history = [("ABC"[i % 3], f"発言{i}") for i in range(11)]
    prompt = build_turn_prompt("C", "テーマ", history)

    for i in range(11):
        assert f"発言{i}" in prompt


def test_summary_prompt_lists_roster_names() -> None:
    prompt = build_summary_prompt("テーマ", ["A", "D", "G"], [("A", "x"), ("D", "y")])

    for key in ("A", "D", "G"):
        assert f'"{PERSONAS[key].name}"' in prompt
    assert f"{PERSONAS['A'].name}: x\n\n{PERSONAS['D'].name}: y" in prompt


def test_parse_summary_strips_code_fences() -> None:
    raw = '```json\n{"自称論理王": "根拠を重視した。"}\n```'
    assert parse_summary(raw) == {"自称論理王": "根拠を重視した。"}


def test_parse_summary_plain_json() -> None:
    assert parse_summary('  {"a": "b"}  ') == {"a": "b"}


@pytest.mark.parametrize("raw", ["はい、要約します。", "[1, 2]", "```\n```"])
def test_parse_summary_rejects_non_objects(raw: str) -> None:
    with pytest.raises(UpstreamError):
        parse_summary(raw)


@pytest.mark.parametrize("raw", ['{"a": {"b": "c"}}', '{"a": 1}', '{"a": "ok", "b": null}'])
def test_parse_summary_rejects_non_string_values(raw: str) -> None:
    with pytest.raises(UpstreamError):
        parse_summary(raw)
