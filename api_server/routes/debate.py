"""Debate API endpoints"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict, Field, StrictInt
from starlette.background import BackgroundTask

from debate_core import DebateService, encode_sse
from api_server.dependencies import get_debate_service
from api_server.middleware.rate_limit import limiter, get_rate_limit_string, get_voter_fingerprint

router = APIRouter(prefix="/debate", tags=["debate"])

# Keep proxies from caching or buffering the event stream
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


# Request models
class StartRequest(BaseModel):
    """Request to start a debate"""
    model_config = ConfigDict(populate_by_name=True)

    topic: str = ""
    total_turns: StrictInt = Field(..., alias="totalTurns")


class VoteRequest(BaseModel):
    """Request to vote for a persona"""
    persona: str = Field(..., max_length=8)


@router.get("/personas")
async def list_personas(service: DebateService = Depends(get_debate_service)):
    """List every persona a debate can draw from"""
    return {"result": True, "data": {"personas": service.list_personas()}}


@router.post("/start", status_code=201)
@limiter.limit(get_rate_limit_string())
async def start_debate(
    request: Request,
    body: StartRequest,
    service: DebateService = Depends(get_debate_service),
):
    """Start a new debate

    Three personas are assigned to the debate and speak in that order.
    """
    debate = service.create_debate(body.topic, body.total_turns)
    snapshot = service.get_snapshot(debate.debate_id)
    return {
        "result": True,
        "data": {
            "id": debate.debate_id,
            "topic": debate.topic,
            "totalTurns": debate.total_turns,
            "personas": snapshot["personas"],
        },
    }


@router.get("/{debate_id}")
async def get_debate(debate_id: str, service: DebateService = Depends(get_debate_service)):
    """Get debate state and every message so far"""
    return {"result": True, "data": service.get_snapshot(debate_id)}


@router.post("/{debate_id}/next")
@limiter.limit(get_rate_limit_string())
async def next_turn(
    request: Request,
    debate_id: str,
    service: DebateService = Depends(get_debate_service),
):
    """Generate the next statement as a Server-Sent Events stream

    Events: chunk (text fragment), done (turn saved) or error.
    Precondition failures are returned as plain JSON errors instead.
    """
    turn = service.begin_turn(debate_id)

    async def event_stream():
        async for event in turn.events():
            yield encode_sse(event)

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        # Covers a client that disconnects before the stream starts
        background=BackgroundTask(turn.release),
    )


@router.get("/{debate_id}/summary")
@limiter.limit(get_rate_limit_string())
async def summarize_debate(
    request: Request,
    debate_id: str,
    service: DebateService = Depends(get_debate_service),
):
    """Summarize each persona's position once the debate is completed"""
    summary = await service.summarize(debate_id)
    return {"result": True, "data": {"summary": summary}}


@router.post("/{debate_id}/vote")
@limiter.limit(get_rate_limit_string())
async def vote(
    request: Request,
    debate_id: str,
    body: VoteRequest,
    service: DebateService = Depends(get_debate_service),
):
    """Vote for a persona; one vote per client per debate"""
    voter = get_voter_fingerprint(request)
    tally = service.cast_vote(debate_id, body.persona, voter)
    return {"result": True, "data": tally}
