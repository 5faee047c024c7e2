"""Logging configuration"""

import logging
import os
import re
import time
import uuid
from typing import Callable, Optional
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_DEBATE_PATH = re.compile(r"^/debate/([0-9a-fA-F-]{36})(?:/|$)")


def setup_logging() -> logging.Logger:
    """Configure JSON-style logging

    Level comes from LOG_LEVEL (default: INFO).
    """
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    return logging.getLogger("api_server")


def debate_id_from_path(path: str) -> Optional[str]:
    """Debate id addressed by a /debate/{id}/... path, if any"""
    match = _DEBATE_PATH.match(path)
    return match.group(1) if match else None


class LoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with a request id and the debate id

    For event streams the duration covers the time until headers are sent,
    not the whole stream.
    """

    def __init__(self, app: FastAPI):
        super().__init__(app)
        self.logger = logging.getLogger("api_server.access")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        fields = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            "ip": request.client.host if request.client else "unknown",
        }
        debate_id = debate_id_from_path(request.url.path)
        if debate_id:
            fields["debate_id"] = debate_id
        if response.headers.get("content-type", "").startswith("text/event-stream"):
            fields["stream"] = True

        line = " ".join(f"{key}={value}" for key, value in fields.items())
        if response.status_code >= 500:
            self.logger.error(line)
        elif response.status_code >= 400:
            self.logger.warning(line)
        else:
            self.logger.info(line)

        response.headers["X-Request-ID"] = request_id
        return response
