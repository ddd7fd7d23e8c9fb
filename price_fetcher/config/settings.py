import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field


class Settings(BaseModel):
    SERVICE_NAME: str = "WSB Price Fetcher"
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, ge=1, le=65535)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    DEFAULT_SOURCE: str = "yahoo"
    YAHOO_BASE_URL: str = "https://query1.finance.yahoo.com"
    UPSTREAM_TIMEOUT_SEC: float = Field(default=5.0, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        raw = {name: os.getenv(name) for name in cls.model_fields}
        values = {name: value.strip() for name, value in raw.items() if value is not None and value.strip()}
        if "LOG_LEVEL" in values:
            values["LOG_LEVEL"] = values["LOG_LEVEL"].upper()
        if "YAHOO_BASE_URL" in values:
            values["YAHOO_BASE_URL"] = values["YAHOO_BASE_URL"].rstrip("/")
        return cls.model_validate(values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
