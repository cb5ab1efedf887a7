# @TASK P0-T0.3 - pydantic-settings based application settings

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Legal documents API settings.

    All values are loaded from environment variables.
    A .env file in the backend directory is also supported.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Database ---
    DATABASE_URL: str = "postgresql+asyncpg://mevzuat:mevzuat@db:5432/mevzuat"

    # --- Timeouts (seconds) ---
    SEARCH_TIMEOUT_SECONDS: float = 30.0
    AUTOCOMPLETE_TIMEOUT_SECONDS: float = 10.0
    CACHE_REFRESH_TIMEOUT_SECONDS: float = 15.0
    REQUEST_TIMEOUT_SECONDS: float = 15.0

    # --- Autocomplete ---
    AUTOCOMPLETE_PHRASES_ENABLED: bool = False  # 2-4 word phrases from body text (slow)

    # --- Scoring overrides, e.g. SEARCH_PARAMS='{"title_weight": 12}' ---
    SEARCH_PARAMS: dict[str, float] = {}

    # --- HTTP ---
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver."""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings singleton."""
    return Settings()
