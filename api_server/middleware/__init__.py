"""Middleware modules"""

from .cors import setup_cors
from .errors import setup_error_handlers, error_response
from .rate_limit import setup_rate_limit, limiter, get_voter_fingerprint
from .logging import setup_logging, LoggingMiddleware

__all__ = [
    "setup_cors",
    "setup_error_handlers",
    "error_response",
    "setup_rate_limit",
    "limiter",
    "get_voter_fingerprint",
    "setup_logging",
    "LoggingMiddleware",
]
