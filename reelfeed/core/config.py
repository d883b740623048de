from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from reelfeed.core.version import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production", "test"] = "production"
    LOG_LEVEL: str = "INFO"

    # Catalog backend (search/channel/video/trending lookups)
    CATALOG_API_URL: str = "http://localhost:3000"
    CATALOG_TIMEOUT_SECONDS: float = 10.0
    CATALOG_MAX_RETRIES: int = 3

    # Feed shaping
    FEED_MAX_ITEMS: int = Field(default=150, ge=100, le=150)
    DISCOVERY_RATIO: float = Field(default=0.65, gt=0.0, lt=1.0)
    SCORE_JITTER: float = Field(default=0.075, ge=0.0, le=0.5)
    # None = nondeterministic; set for reproducible orderings
    RANDOM_SEED: int | None = None


settings = Settings()

APP_VERSION = __version__
