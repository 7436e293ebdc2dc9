from typing import Literal

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    """

    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60
    log_level: str = "INFO"
    grid_max_width: int = 52
    message_min_length: int = 1
    message_max_length: int = 30
    default_theme: Literal["light", "dark"] = "dark"
    default_animation: Literal["wave", "spiral", "fade", "random"] = "wave"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
