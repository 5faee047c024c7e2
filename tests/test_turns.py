"""Tests for turn advancement: streaming, persistence and guards."""

import asyncio

import pytest

from conftest import FakeGenerator, drain, run_turns
from debate_core import (
    ConflictError,
    DebateStatus,
    InvalidStateError,
    NotFoundError,
    TurnAdvancer,
)


def test_turn_streams_chunks_then_done(service, store) -> None:
    debate = service.create_debate("リモートワーク", 6)

    events = asyncio.run(drain(service.begin_turn(debate.debate_id)))

    assert events == [
        {"type": "chunk", "content": "まず、"},
        {"type": "chunk", "content": "結論から"},
        {"type": "chunk", "content": "言うね。"},
        {"type": "done", "turnNumber": 1, "persona": "A", "isLastTurn": False},
    ]
    [message] = store.list_messages(debate.debate_id)
    assert message.content == "まず、結論から言うね。"
    assert message.persona == "A"
    assert message.turn_number == 1


def test_each_turn_adds_exactly_one_message(service, store) -> None:
    debate = service.create_debate("テーマ", 6)

    for expected in range(1, 7):
        [events] = run_turns(service, debate.debate_id, 1)
        messages = store.list_messages(debate.debate_id)
        assert len(messages) == expected
        assert [m.turn_number for m in messages] == list(range(1, expected + 1))
        assert events[-1]["turnNumber"] == expected


def test_debate_completes_exactly_at_last_turn(service, store) -> None:
    debate = service.create_debate("テーマ", 6)

    results = run_turns(service, debate.debate_id, 5)
    assert store.get_debate(debate.debate_id).status == DebateStatus.ONGOING
    assert all(not events[-1]["isLastTurn"] for events in results)

    [last] = run_turns(service, debate.debate_id, 1)
    assert last[-1] == {"type": "done", "turnNumber": 6, "persona": "C", "isLastTurn": True}
    assert store.get_debate(debate.debate_id).status == DebateStatus.COMPLETED
    speakers = [m.persona for m in store.list_messages(debate.debate_id)]
    assert speakers == ["A", "B", "C", "A", "B", "C"]


def test_completed_debate_rejects_more_turns(service, store) -> None:
    debate = service.create_debate("テーマ", 6)
    run_turns(service, debate.debate_id, 6)

    for _ in range(2):
        with pytest.raises(InvalidStateError):
            service.begin_turn(debate.debate_id)
    assert store.count_messages(debate.debate_id) == 6
    assert not service.turns.is_in_flight(debate.debate_id)


def test_unknown_debate_is_not_found(service) -> None:
    with pytest.raises(NotFoundError):
        service.begin_turn("no-such-debate")
    assert service.turns.in_flight_count == 0


def test_prompt_carries_full_history(service, generator) -> None:
    debate = service.create_debate("テーマ", 6)
    run_turns(service, debate.debate_id, 3)

    assert generator.prompts[0].count("まず、結論から言うね。") == 0
    assert generator.prompts[2].count("まず、結論から言うね。") == 2


def test_concurrent_requests_persist_one_turn(service, store) -> None:
    debate = service.create_debate("テーマ", 6)
    run_turns(service, debate.debate_id, 2)

    async def attempt():
        try:
            return await drain(service.begin_turn(debate.debate_id))
        except ConflictError:
            return "conflict"

    async def race():
        return await asyncio.gather(attempt(), attempt())

    results = asyncio.run(race())

    assert "conflict" in results
    messages = store.list_messages(debate.debate_id)
    assert [m.turn_number for m in messages] == [1, 2, 3]


def test_store_rejects_duplicate_turn_from_second_worker(store) -> None:
    """Two advancers (e.g. two server processes) sharing one store."""
    first = TurnAdvancer(store, FakeGenerator(chunks=["一"]))
    second = TurnAdvancer(store, FakeGenerator(chunks=["二"]))
    debate = store.create_debate("テーマ", 6, ["A", "B", "C"])

    async def race():
        return await asyncio.gather(
            drain(first.begin(debate.debate_id)),
            drain(second.begin(debate.debate_id)),
        )

    events_a, events_b = asyncio.run(race())

    outcomes = sorted([events_a[-1]["type"], events_b[-1]["type"]])
    assert outcomes == ["done", "error"]
    assert store.count_messages(debate.debate_id) == 1


def test_generation_failure_persists_nothing(store) -> None:
    service_generator = FakeGenerator(fail_after=1)
    advancer = TurnAdvancer(store, service_generator)
    debate = store.create_debate("テーマ", 6, ["A", "B", "C"])

    events = asyncio.run(drain(advancer.begin(debate.debate_id)))

    assert events[0] == {"type": "chunk", "content": "まず、"}
    assert events[-1]["type"] == "error"
    assert "upstream" not in events[-1]["message"]
    assert len(events) == 2
    assert store.count_messages(debate.debate_id) == 0
    assert not advancer.is_in_flight(debate.debate_id)


def test_empty_generation_is_an_error(store) -> None:
    advancer = TurnAdvancer(store, FakeGenerator(chunks=[]))
    debate = store.create_debate("テーマ", 6, ["A", "B", "C"])

    events = asyncio.run(drain(advancer.begin(debate.debate_id)))

    assert [e["type"] for e in events] == ["error"]
    assert store.count_messages(debate.debate_id) == 0


def test_abandoned_stream_closes_upstream_and_saves_nothing(service, store, generator) -> None:
    debate = service.create_debate("テーマ", 6)

    async def abandon():
        events = service.begin_turn(debate.debate_id).events()
        first = await events.__anext__()
        await events.aclose()
        return first

    first = asyncio.run(abandon())

    assert first["type"] == "chunk"
    assert generator.closed == 1
    assert store.count_messages(debate.debate_id) == 0
    assert not service.turns.is_in_flight(debate.debate_id)

    # The same turn is generated again by the next request
    [events] = run_turns(service, debate.debate_id, 1)
    assert events[-1]["turnNumber"] == 1


def test_release_does_not_drop_a_newer_claim(service) -> None:
    debate = service.create_debate("テーマ", 6)
    old = service.begin_turn(debate.debate_id)
    old.release()

    newer = service.begin_turn(debate.debate_id)
    old.release()

    assert service.turns.is_in_flight(debate.debate_id)
    newer.release()
    assert not service.turns.is_in_flight(debate.debate_id)
