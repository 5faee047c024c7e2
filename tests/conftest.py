"""Shared fixtures: in-memory store, scripted generator, API client."""

import asyncio
import random

import pytest
from fastapi.testclient import TestClient

from debate_core import DebateService, DebateStore
from llm_client import LLMError


class FakeGenerator:
    """Scripted stand-in for the Groq client.

    ``stream`` yields ``chunks`` one by one, giving the event loop a chance to
    run other tasks between fragments.
    """

    def __init__(self, chunks=None, summary='{"自称論理王": "データ重視"}', fail_after=None):
        self.chunks = list(chunks) if chunks is not None else ["まず、", "結論から", "言うね。"]
        self.summary = summary
        self.fail_after = fail_after
        self.prompts: list[str] = []
        self.closed = 0
        self.gate: asyncio.Event | None = None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if isinstance(self.summary, Exception):
            raise self.summary
        return self.summary

    async def stream(self, prompt: str):
        self.prompts.append(prompt)
        try:
            for index, chunk in enumerate(self.chunks):
                if self.fail_after is not None and index == self.fail_after:
                    raise LLMError("upstream broke")
                if self.gate is not None:
                    await self.gate.wait()
                await asyncio.sleep(0)
                yield chunk
        finally:
            self.closed += 1


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def store():
    store = DebateStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def service(store, generator) -> DebateService:
    """Service whose debates always get roster A, B, C."""
    return DebateService(store, generator, rng=random.Random(7), sampling="fixed")


@pytest.fixture
def client(service):
    from api_server.dependencies import get_debate_service
    from api_server.main import app
    from api_server.middleware import limiter

    limiter.reset()
    app.dependency_overrides[get_debate_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


async def drain(turn) -> list[dict]:
    """Collect every event of a turn stream."""
    return [event async for event in turn.events()]


def run_turns(service: DebateService, debate_id: str, count: int) -> list[list[dict]]:
    async def go():
        return [await drain(service.begin_turn(debate_id)) for _ in range(count)]

    return asyncio.run(go())
