"""FastAPI application entry point"""

import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables
load_dotenv()

from api_server.dependencies import shutdown_service
from api_server.middleware import (
    setup_cors,
    setup_error_handlers,
    setup_rate_limit,
    setup_logging,
    LoggingMiddleware,
)
from api_server.routes import health_router, debate_router
from debate_core.config import DEFAULT_DB_PATH, DEFAULT_PERSONA_SAMPLING

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting debate API: db={os.getenv('DEBATE_DB_PATH', DEFAULT_DB_PATH)} "
        f"sampling={os.getenv('PERSONA_SAMPLING', DEFAULT_PERSONA_SAMPLING)}"
    )
    yield
    shutdown_service()
    logger.info("Debate API stopped")


app = FastAPI(
    title="AI Persona Debate API",
    description="Three AI personas debate a topic turn by turn, streamed as Server-Sent Events",
    version="1.0.0",
    lifespan=lifespan,
)

setup_cors(app)
setup_rate_limit(app)
setup_error_handlers(app)
app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(debate_router)


@app.get("/")
async def root():
    """Service banner with pointers to the docs and health check"""
    return {
        "message": "AI Persona Debate API",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api_server.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
