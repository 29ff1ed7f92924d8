"""Configuration package."""

from newsbot.config.loader import ConfigError, load_config
from newsbot.config.schema import Config

__all__ = ["Config", "ConfigError", "load_config"]
