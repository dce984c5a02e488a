from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://v6.exchangerate-api.com/v6"


class Settings(BaseSettings):
    """Connection settings for the ExchangeRate-API pair endpoint."""

    base_url: str = Field(DEFAULT_BASE_URL, validation_alias="EXCHANGE_RATE_API_BASE_URL")
    api_key: str = Field("", validation_alias="EXCHANGE_RATE_API_KEY")
    # Unset means the aiohttp client default
    timeout: float | None = Field(None, validation_alias="EXCHANGE_RATE_API_TIMEOUT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()
