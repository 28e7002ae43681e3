from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "talkjs-bff"
    VERSION: str = "0.1.0"
    ENV: str = "development"
    PORT: int = 3000

    # Logs
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILE_NAME: str = "talkjs-bff.log"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # TalkJS: un par appId/secret por entorno (dev / prod)
    TALKJS_APP_ID_DEV: str = Field(default="")
    TALKJS_SECRET_KEY_DEV: str = Field(default="")
    TALKJS_APP_ID_PRO: str = Field(default="")
    TALKJS_SECRET_KEY_PRO: str = Field(default="")

    TALKJS_API_BASE_URL: str = "https://api.talkjs.com"
    TALKJS_TIMEOUT_SECONDS: float = 20.0

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
