from functools import lru_cache
from typing import Annotated, List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="purchase-management-api")
    log_level: str = Field(default="INFO")
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    cors_origin_regex: str | None = Field(
        default=r"^(http://(localhost|127\.0\.0\.1):\d+|https://[\w-]+\.(web\.app|firebaseapp\.com))$"
    )
    store_base_url: AnyHttpUrl | None = Field(
        default=None
    )
    store_token: str | None = Field(
        default=None
    )
    store_timeout: float = Field(
        default=10.0
    )
    use_mock_data: bool = Field(
        default=True
    )

    model_config = SettingsConfigDict(env_prefix="BACKOFFICE_", case_sensitive=False)

    @field_validator("cors_origins", mode="before")
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("log_level", mode="before")
    def _upper_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
