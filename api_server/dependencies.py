"""Shared service wiring for route handlers"""

import os
import threading
from typing import Optional

from debate_core import DebateService, get_store
from debate_core.store import close_store
from debate_core.config import DEFAULT_PERSONA_SAMPLING
from llm_client import GroqClient

_service: Optional[DebateService] = None
_service_lock = threading.Lock()


def get_debate_service() -> DebateService:
    """Process-wide DebateService, built on first use

    Tests replace it through ``app.dependency_overrides``.
    """
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = DebateService(
                    store=get_store(),
                    generator=GroqClient(),
                    sampling=os.getenv("PERSONA_SAMPLING", DEFAULT_PERSONA_SAMPLING),
                )
    return _service


def shutdown_service() -> None:
    """Drop the shared service and close the process-wide store"""
    global _service
    with _service_lock:
        _service = None
    close_store()
