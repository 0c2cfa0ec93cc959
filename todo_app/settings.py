from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    ENVIRONMENT: str = "development"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str | None = None
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    # Store settings
    DATABASE_URL: str = "sqlite://"

    # Built assets (output of the client/style build tooling)
    CLIENT_BUNDLE_PATH: str | None = None
    STYLES_PATH: str | None = None
    WATCH_ASSETS: bool = False

    # Render settings
    DEV_MODE: bool = False
    RENDER_MODE: Literal["stream", "buffer"] = "stream"

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000


app_settings = Settings()
