# ecofurnish/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key, the storefront acts on behalf of visitors)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SITE_URL (where the OAuth provider sends the visitor back)
      - SESSION_IDLE_TTL_SECONDS (idle browser sessions are evicted after this)
      - SESSION_FIRST_VISIT_TTL_SECONDS (same, for sessions that never came back)
      - CART_SYNC_ATTEMPTS / CART_SYNC_BACKOFF_SECONDS (remote cart mirror retries)
    """

    PROJECT_NAME: str = "EcoFurnish Storefront API"
    API_V1_STR: str = "/api/v1"

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Browser sessions
    SITE_URL: str = "http://localhost:8080"
    CORS_ORIGINS: list[str] = [
        "http://localhost:8080",
        "http://127.0.0.1:8080",
        "http://localhost:5173",
    ]
    SESSION_COOKIE_NAME: str = "ecofurnish_sid"
    SESSION_IDLE_TTL_SECONDS: int = 60 * 60
    SESSION_FIRST_VISIT_TTL_SECONDS: int = 5 * 60

    # Remote cart mirror
    CART_SYNC_ATTEMPTS: int = 3
    CART_SYNC_BACKOFF_SECONDS: float = 0.5

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def supabase_configured(self) -> bool:
        """False while the project still points at the placeholder backend."""
        return bool(self.SUPABASE_URL) and "placeholder" not in self.SUPABASE_URL


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
