"""Groq API client"""

import asyncio
import logging
import os
from typing import AsyncGenerator, Optional

from .exceptions import RateLimitError, APIKeyError, LLMError, StreamInterruptedError

logger = logging.getLogger(__name__)


def _classify(error: Exception) -> Optional[LLMError]:
    """Map a Groq SDK error to our exceptions; None means retryable rate limit"""
    error_msg = str(error).lower()

    # Check for rate limit errors
    if "rate" in error_msg or "limit" in error_msg or "429" in error_msg:
        return None

    # Check for auth errors
    if "auth" in error_msg or "key" in error_msg or "401" in error_msg:
        return APIKeyError("Invalid API key")

    return LLMError(f"Groq API error: {error}")


class GroqClient:
    """Client for Groq API"""

    DEFAULT_MODEL = "llama-3.3-70b-versatile"
    DEFAULT_MAX_TOKENS_STREAM = 500
    DEFAULT_MAX_TOKENS_GENERATE = 800

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: int = 3,
    ):
        """Initialize the Groq client

        Args:
            api_key: Groq API key. If not provided, reads from GROQ_API_KEY env var.
            model: Model to use. If not provided, reads GROQ_MODEL or uses DEFAULT_MODEL.
            max_retries: Number of attempts on rate limit
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        self.model = model or os.getenv("GROQ_MODEL") or self.DEFAULT_MODEL
        self.max_retries = max_retries
        self._client = None

    def _get_client(self):
        """Lazy initialization of Groq client

        Raises:
            APIKeyError: If no API key is configured
        """
        if not self.api_key:
            raise APIKeyError(
                "GROQ_API_KEY not found. Set it as an environment variable or pass it to the constructor."
            )
        if self._client is None:
            from groq import AsyncGroq
            self._client = AsyncGroq(api_key=self.api_key)
        return self._client

    async def _create(self, prompt: str, max_tokens: int, stream: bool):
        """Send a chat completion request, retrying on rate limit"""
        client = self._get_client()

        for attempt in range(self.max_retries):
            try:
                return await client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=max_tokens,
                    stream=stream,
                )
            except Exception as e:
                error = _classify(e)
                if error is not None:
                    raise error from e

                wait_time = 5 * (attempt + 1)
                if attempt < self.max_retries - 1:
                    logger.warning(f"Groq rate limited, retrying in {wait_time}s")
                    await asyncio.sleep(wait_time)
                    continue
                raise RateLimitError(
                    f"API rate limit exceeded after {self.max_retries} retries",
                    retry_after=60,
                ) from e

        raise LLMError("Unexpected error in _create")

    async def generate(self, prompt: str, max_tokens: Optional[int] = None) -> str:
        """Get a complete response

        Raises:
            RateLimitError: If rate limited after all retries
            LLMError: For other API errors
        """
        response = await self._create(prompt, max_tokens or self.DEFAULT_MAX_TOKENS_GENERATE, stream=False)
        return response.choices[0].message.content or ""

    async def stream(self, prompt: str, max_tokens: Optional[int] = None) -> AsyncGenerator[str, None]:
        """Yield the response in fragments as they are generated

        Only opening the stream is retried. Once fragments have been handed out
        a failure is raised as StreamInterruptedError.
        """
        response = await self._create(prompt, max_tokens or self.DEFAULT_MAX_TOKENS_STREAM, stream=True)
        received = []
        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    received.append(text)
                    yield text
        except LLMError:
            raise
        except Exception as e:
            logger.warning(f"Groq stream broke after {len(received)} fragments: {e}")
            raise StreamInterruptedError(
                f"Groq stream interrupted: {e}", partial="".join(received)
            ) from e
        finally:
            await response.close()
