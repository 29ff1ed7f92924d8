"""Chat-completion client backed by LiteLLM."""

import os
from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from newsbot.providers.base import LLMProvider, LLMResponse

TRANSPORT_ERROR = "Error communicating with the LLM provider."


class LiteLLMProvider(LLMProvider):
    """Sends prompts to any LiteLLM-supported completion endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = "gpt-4-0125-preview",
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model
        self.max_tokens = max_tokens
        self.temperature = temperature

        self.is_openrouter = bool(
            (api_key and api_key.startswith("sk-or-")) or
            (api_base and "openrouter" in api_base)
        )

        if api_key:
            if self.is_openrouter:
                os.environ["OPENROUTER_API_KEY"] = api_key
            elif "anthropic" in default_model or "claude" in default_model:
                os.environ.setdefault("ANTHROPIC_API_KEY", api_key)
            elif "gemini" in default_model.lower():
                os.environ.setdefault("GEMINI_API_KEY", api_key)
            elif "groq" in default_model:
                os.environ.setdefault("GROQ_API_KEY", api_key)
            else:
                os.environ.setdefault("OPENAI_API_KEY", api_key)

        litellm.suppress_debug_info = True

    async def chat(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        model = model or self.default_model
        if self.is_openrouter and not model.startswith("openrouter/"):
            model = f"openrouter/{model}"

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if self.api_key:
            kwargs["api_key"] = self.api_key

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"Error requesting completion from {model}: {e}")
            return LLMResponse(content=TRANSPORT_ERROR, finish_reason="error")
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> LLMResponse:
        """Pull the first choice's text out of a completion response.

        Missing ``choices``, ``message`` or ``content`` gives an empty
        LLMResponse rather than an exception.
        """
        choices = getattr(response, "choices", None) or []
        if not choices:
            logger.warning("Completion response has no choices")
            return LLMResponse(content=None, finish_reason="error")

        choice = choices[0]
        message = getattr(choice, "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            logger.warning("Completion response has no message content")
            return LLMResponse(content=None, finish_reason="error")

        usage = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=content,
            finish_reason=getattr(choice, "finish_reason", None) or "stop",
            usage=usage,
        )
