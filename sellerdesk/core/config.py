# sellerdesk/core/config.py
# -----------------------------------------------------------------------------
# Global settings (pydantic-settings v2)
# - reads the .env file and OS environment into a Settings object
# - typed defaults for every knob the service exposes
# -----------------------------------------------------------------------------
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # basics
    APP_NAME: str = "SellerDesk"
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite+aiosqlite:///./sellerdesk.db"
    FRONTEND_URL: str = "http://localhost:5173"  # CORS origin

    # credentials
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 7 * 24 * 60
    BCRYPT_ROUNDS: int = 12

    # logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # store product feeds: {"shopee": "https://feed.example/products", ...}
    STORE_FEED_URLS: dict[str, str] = {}
    STORE_FEED_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore"  # ignore unrelated keys in .env
    )

    @property
    def async_database_url(self) -> str:
        """Hosted Postgres hands out postgres:// URLs; the async engine needs asyncpg."""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


settings = Settings()
