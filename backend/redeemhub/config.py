import os
import tempfile
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = Field(
        "development", validation_alias=AliasChoices("APP_ENV", "NODE_ENV")
    )
    DATABASE_URL: Optional[str] = None
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = Field(3000, validation_alias=AliasChoices("APP_PORT", "PORT"))
    FRONTEND_ORIGINS: List[str] = ["*"]

    # placeholder credentials checked by StaticCredentialVerifier
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    USER_PASSWORD: str = "1"

    CODE_DEFAULT_PREFIX: str = "AMP"
    CODE_MAX_ATTEMPTS: int = 10
    MESSAGES_LIMIT: int = 50

    SEED_SAMPLE_DATA: bool = True
    SEED_ACCOUNTS_DELAY_SECONDS: float = 1.0
    SCHEDULER_ENABLED: bool = True
    STOCK_RECONCILE_INTERVAL_SECONDS: int = 0  # 0 = disabled

    LOCK_DIR: str = os.path.join(tempfile.gettempdir(), "redeemhub_locks")
    LOCK_TIMEOUT_SECONDS: float = 10.0
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """Explicit DATABASE_URL, else a sqlite file chosen by APP_ENV."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.APP_ENV == "production":
            return "sqlite:////tmp/database.db"
        return "sqlite:///./database.db"


settings = Settings()
