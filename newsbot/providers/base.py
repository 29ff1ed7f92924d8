"""LLM provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

EXTRACTION_FAILED = "Failed to extract response."


@dataclass(frozen=True)
class LLMResponse:
    """Typed completion result; ``content`` is None when no text came back."""

    content: str | None
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.content if self.content is not None else EXTRACTION_FAILED


class LLMProvider(ABC):

    def __init__(self, api_key: str | None = None, api_base: str | None = None):
        self.api_key = api_key
        self.api_base = api_base

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Run one chat completion. Implementations must not raise."""

    async def complete(self, prompt: str) -> str:
        """Send a single user prompt and return the generated text."""
        response = await self.chat(messages=[{"role": "user", "content": prompt}])
        return response.text
