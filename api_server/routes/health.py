"""Health check endpoint"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from debate_core import DebateService
from api_server.dependencies import get_debate_service

router = APIRouter()

VERSION = "1.0.0"


@router.get("/health")
async def health_check(service: DebateService = Depends(get_debate_service)):
    """Health check endpoint

    Returns:
        Health status with timestamp, version and turns being generated
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": VERSION,
        "turnsInFlight": service.turns.in_flight_count,
    }
