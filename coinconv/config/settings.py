import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, field_validator

DEFAULT_STATIC_DIR = str(Path(__file__).resolve().parents[1] / "root")


class Settings(BaseModel):
    PORT: int = 3000
    HOST: str = "0.0.0.0"
    BASE_CURRENCY: str = "USDT"
    TICKER_URL: str = "https://api2.binance.com/api/v3/ticker/24hr"
    TICKER_TIMEOUT_SEC: float = 5.0
    REFRESH_INTERVAL_SEC: float = 60.0
    STATIC_DIR: str = DEFAULT_STATIC_DIR
    LOG_SINK_URL: str | None = None

    @field_validator("BASE_CURRENCY")
    @classmethod
    def normalize_base_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("BASE_CURRENCY must not be empty")
        return value

    @field_validator("TICKER_TIMEOUT_SEC", "REFRESH_INTERVAL_SEC")
    @classmethod
    def require_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than 0")
        return value

    @field_validator("LOG_SINK_URL")
    @classmethod
    def blank_sink_is_disabled(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @classmethod
    def from_env(cls) -> "Settings":
        raw = {
            "PORT": os.getenv("PORT"),
            "HOST": os.getenv("HOST"),
            "BASE_CURRENCY": os.getenv("COIN_BASE_CURRENCY"),
            "TICKER_URL": os.getenv("TICKER_URL"),
            "TICKER_TIMEOUT_SEC": os.getenv("TICKER_TIMEOUT_SEC"),
            "REFRESH_INTERVAL_SEC": os.getenv("REFRESH_INTERVAL_SEC"),
            "STATIC_DIR": os.getenv("STATIC_DIR"),
            "LOG_SINK_URL": os.getenv("LOG_SINK_URL"),
        }
        # unset env keeps the field default
        return cls.model_validate({k: v for k, v in raw.items() if v is not None})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
