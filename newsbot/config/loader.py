"""Configuration loading."""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError

from newsbot.config.schema import ENV_FILE, Config


class ConfigError(Exception):
    """Raised when the configuration is unusable; fatal at startup."""


# Flat variables from the process environment or .env, mapped onto nested settings.
LEGACY_ENV_VARS: dict[str, tuple[str, str]] = {
    "TELEGRAM_BOT_TOKEN": ("telegram", "token"),
    "TELEGRAM_ALERT_CHAT_ID": ("telegram", "alert_chat_id"),
    "OPENAI_API_KEY": ("llm", "api_key"),
    "CRYPTOPANIC_AUTH_TOKEN": ("news", "cryptopanic_token"),
    "CRYPTOCOMPARE_API_KEY": ("news", "cryptocompare_api_key"),
    "NEWSAPI_API_KEY": ("news", "newsapi_api_key"),
}


def get_config_path() -> Path:
    return Path.home() / ".newsbot" / "config.json"


def load_config(config_path: Path | None = None, require: bool = True) -> Config:
    """Build the Config from the JSON file, the environment and ``.env``.

    Raises ConfigError when the file is malformed or, with ``require``, when a
    required setting is missing.
    """
    path = config_path or get_config_path()

    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path) as f:
                data = convert_keys(json.load(f))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    data = _apply_legacy_env(data, _flat_env())

    try:
        config = Config(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    if require:
        missing = config.missing_required()
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")
    return config


def _flat_env() -> dict[str, str]:
    """The process environment layered over ``.env`` in the working directory."""
    values = {k: v for k, v in dotenv_values(ENV_FILE).items() if v is not None}
    values.update(os.environ)
    return values


def _apply_legacy_env(data: dict[str, Any], env: dict[str, str]) -> dict[str, Any]:
    """Fill unset values from the flat legacy variables."""
    for env_name, (section, key) in LEGACY_ENV_VARS.items():
        value = env.get(env_name)
        if not value or env.get(f"NEWSBOT_{section.upper()}__{key.upper()}"):
            continue
        section_data = data.setdefault(section, {})
        section_data.setdefault(key, value)
    return data


def convert_keys(data: Any) -> Any:
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)
