"""Configuration loading and validation using Pydantic."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_NEWS_API_URL = "https://hiru-news2.vercel.app/api"


class NewsApiConfig(BaseModel):
    base_url: str = DEFAULT_NEWS_API_URL
    timeout_seconds: float = Field(default=15.0, gt=0)
    list_limit: int = Field(default=5, ge=1, le=20)
    search_limit: int = Field(default=3, ge=1, le=10)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v


class PollerConfig(BaseModel):
    """Settings for the new-article poll loop."""

    interval_minutes: float = Field(default=10.0, gt=0)
    notify_after_failed_probe: bool = False
    excerpt_chars: int = Field(default=300, ge=0)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)


class TransportConfig(BaseModel):
    provider: str = "neonize"
    session_db: str = "newsbridge.sqlite3"


class CrashGuardConfig(BaseModel):
    suppressed_patterns: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    app_log: str = "logs/newsbridge.log"
    delivery_log: str = "logs/deliveries.log"
    max_bytes: int = 10485760
    backup_count: int = 5


class AppConfig(BaseModel):
    news_api: NewsApiConfig = Field(default_factory=NewsApiConfig)
    poller: PollerConfig = Field(default_factory=PollerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    crash_guard: CrashGuardConfig = Field(default_factory=CrashGuardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class EnvOverrides(BaseSettings):
    """Loaded from the environment or a .env file automatically."""

    port: Optional[int] = None
    news_api_url: Optional[str] = None
    poll_interval_minutes: Optional[float] = None
    log_level: Optional[str] = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def apply_env_overrides(config: AppConfig, env: EnvOverrides) -> AppConfig:
    """Return a copy of config with any environment values applied on top."""
    raw = config.model_dump()
    if env.port is not None:
        raw["server"]["port"] = env.port
    if env.news_api_url:
        raw["news_api"]["base_url"] = env.news_api_url
    if env.poll_interval_minutes is not None:
        raw["poller"]["interval_minutes"] = env.poll_interval_minutes
    if env.log_level:
        raw["logging"]["level"] = env.log_level
    # Re-validate so overrides go through the same field checks as YAML
    return AppConfig(**raw)


def load_config(config_path: Path = Path("config/settings.yaml")) -> AppConfig:
    """Load and validate application configuration from YAML.

    A missing file is not an error: every setting has a default, and the
    platform may supply what it needs through the environment alone.
    """
    raw: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

    return apply_env_overrides(AppConfig(**raw), EnvOverrides())
