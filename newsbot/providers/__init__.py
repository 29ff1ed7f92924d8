"""LLM providers."""

from newsbot.providers.base import LLMProvider, LLMResponse
from newsbot.providers.litellm_provider import LiteLLMProvider

__all__ = ["LLMProvider", "LLMResponse", "LiteLLMProvider"]
