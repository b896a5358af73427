from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAPI_URL = "https://api.passport.xyz/v2/openapi.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PLAYGROUND_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # The two upstream-facing values keep the names the deployment already uses.
    passport_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("PASSPORT_API_KEY", "PLAYGROUND_PASSPORT_API_KEY"),
    )
    passport_scorer_id: str = Field(
        default="",
        validation_alias=AliasChoices("PASSPORT_SCORER_ID", "PLAYGROUND_PASSPORT_SCORER_ID"),
    )

    openapi_url: str = Field(default=DEFAULT_OPENAPI_URL)
    spec_cache_ttl_sec: float = Field(default=3600.0, ge=0.0, le=86400.0)
    request_timeout_sec: float | None = Field(default=None, gt=0.0)
    log_level: str = Field(default="INFO")
    origin: str = Field(default="http://localhost:8000")

    def has_api_key(self) -> bool:
        return bool(self.passport_api_key.strip())


def get_settings() -> Settings:
    return Settings()
