"""newsbot: crypto news, LLM replies and trading alerts on Telegram."""

__version__ = "0.1.0"
