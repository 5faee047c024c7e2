"""Exceptions for LLM client"""

from typing import Optional


class LLMError(Exception):
    """Base exception for anything that goes wrong talking to the model"""

    def __init__(self, message: str = "LLM request failed"):
        super().__init__(message)
        self.message = message


class RateLimitError(LLMError):
    """Still rate limited after every retry; ``retry_after`` is in seconds"""

    def __init__(self, message: str = "API rate limit exceeded", retry_after: int = 60):
        super().__init__(message)
        self.retry_after = retry_after


class APIKeyError(LLMError):
    """No key configured, or the provider rejected it. Never retried."""

    def __init__(self, message: str = "API key is missing or invalid"):
        super().__init__(message)


class StreamInterruptedError(LLMError):
    """A streamed response broke off partway

    ``partial`` holds the text received before the break. It cannot be
    resumed, so callers discard it rather than persist a truncated turn.
    """

    def __init__(self, message: str = "Stream interrupted", partial: Optional[str] = None):
        super().__init__(message)
        self.partial = partial or ""
