"""LLM Client - Abstraction layer for LLM APIs"""

from .base import TextGenerator
from .exceptions import LLMError, RateLimitError, APIKeyError, StreamInterruptedError
from .groq_client import GroqClient

__all__ = [
    "TextGenerator",
    "LLMError",
    "RateLimitError",
    "APIKeyError",
    "StreamInterruptedError",
    "GroqClient",
]
