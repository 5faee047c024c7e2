"""CORS configuration"""

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def get_allowed_origins() -> list[str]:
    """Origins from ALLOWED_ORIGINS (comma separated); empty means any origin"""
    origins_str = os.getenv("ALLOWED_ORIGINS", "")
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


def setup_cors(app: FastAPI) -> None:
    """Configure CORS middleware

    Without ALLOWED_ORIGINS every origin is allowed (development/demo).
    """
    origins = get_allowed_origins()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        # Credentials cannot be combined with a wildcard origin
        allow_credentials=bool(origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
