"""Rate limiting and client identification"""

import os
from typing import Optional
from fastapi import FastAPI, Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded


def _forwarded_for(request: Request) -> Optional[str]:
    """First address of X-Forwarded-For, if any"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return None


def get_client_ip(request: Request) -> str:
    """Get client IP address, handling proxies"""
    # Check X-Forwarded-For header first (for reverse proxies)
    return _forwarded_for(request) or get_remote_address(request)


def get_voter_fingerprint(request: Request) -> str:
    """Identify a voter from proxy headers

    X-Forwarded-For (first address) wins, then X-Real-IP, else "unknown".
    """
    return _forwarded_for(request) or request.headers.get("X-Real-IP") or "unknown"


# Create limiter instance
limiter = Limiter(key_func=get_client_ip)


def setup_rate_limit(app: FastAPI) -> None:
    """Configure rate limiting

    Per-route limits come from RATE_LIMIT_PER_MINUTE (default: 30).
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def get_rate_limit_string() -> str:
    """Get the rate limit string from environment"""
    per_minute = os.getenv("RATE_LIMIT_PER_MINUTE", "30")
    return f"{per_minute}/minute"
