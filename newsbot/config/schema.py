"""Configuration schema."""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"


class TelegramConfig(BaseModel):
    token: str = ""  # Bot token from @BotFather
    alert_chat_id: int | None = None  # Destination for webhook alerts
    reply_to_prompts: bool = True  # Tag LLM answers as replies to the prompt
    proxy: str | None = None  # e.g. "http://127.0.0.1:7890" or "socks5://127.0.0.1:1080"
    poll_timeout: int = 60


class LLMConfig(BaseModel):
    api_key: str = ""
    api_base: str | None = None
    model: str = "gpt-4-0125-preview"
    max_tokens: int = 1024
    temperature: float = 0.7


class NewsConfig(BaseModel):
    cryptopanic_token: str = ""
    cryptocompare_api_key: str = ""
    newsapi_api_key: str = ""
    cryptocompare_categories: str = "BTC,ETH"
    newsapi_page_size: int = 1
    default_query: str = "crypto"  # NewsAPI needs a non-empty q
    timeout: float = 15.0


class StorageConfig(BaseModel):
    db_path: str = "crypto_news.db"


class GatewayConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    webhook_path: str = "/webhook"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: str | None = None
    rotation: str = "10 MB"
    retention: int = 5


class Config(BaseSettings):
    """Root configuration.

    Values come from (highest first) init kwargs, ``NEWSBOT_*`` environment
    variables and a ``.env`` file, e.g. ``NEWSBOT_TELEGRAM__TOKEN``.
    """

    model_config = SettingsConfigDict(
        env_prefix="NEWSBOT_",
        env_nested_delimiter="__",
        env_file=ENV_FILE,
        extra="ignore",
    )

    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def db_path(self) -> Path:
        return Path(self.storage.db_path).expanduser()

    def missing_required(self) -> list[str]:
        """Names of required settings that are empty."""
        required = {
            "telegram.token": self.telegram.token,
            "llm.api_key": self.llm.api_key,
            "news.cryptopanic_token": self.news.cryptopanic_token,
            "news.cryptocompare_api_key": self.news.cryptocompare_api_key,
            "news.newsapi_api_key": self.news.newsapi_api_key,
        }
        return [name for name, value in required.items() if not value]

    def secrets(self) -> list[str]:
        """Credential values that must never reach the logs."""
        values = [
            self.telegram.token,
            self.llm.api_key,
            self.news.cryptopanic_token,
            self.news.cryptocompare_api_key,
            self.news.newsapi_api_key,
        ]
        return [v for v in values if v]
