"""Generation interface shared by LLM clients"""

from typing import AsyncGenerator, Protocol


class TextGenerator(Protocol):
    """Anything that can turn a prompt into text

    ``stream`` yields non-empty fragments in order. It is forward-only and
    cannot be restarted; closing the iterator abandons the upstream request.
    """

    async def generate(self, prompt: str) -> str:
        ...

    def stream(self, prompt: str) -> AsyncGenerator[str, None]:
        ...
