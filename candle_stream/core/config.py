"""Environment-driven settings shared by the API and simulator processes."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a local .env file."""

    APP_NAME: str = "Candle Stream"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    VERSION: str = "0.1.0"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    BUCKET_WIDTH_SECONDS: int = Field(default=60, gt=0)
    TICK_INTERVAL_MS: int = Field(default=1000, gt=0)
    BUY_MULTIPLIER: float = Field(default=1.05, gt=0.0)
    SELL_MULTIPLIER: float = Field(default=0.95, gt=0.0)
    PRICE_FLOOR: float = Field(default=0.0, ge=0.0)
    INITIAL_PRICE: float = Field(default=150.0, ge=0.0)
    PRICE_JITTER: float = Field(default=1.0, ge=0.0)
    WS_PUSH_INTERVAL_MS: int = Field(default=250, gt=0)
    SIMULATOR_MAX_TICKS: int = Field(default=0, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_initial_price(self) -> "Settings":
        if self.INITIAL_PRICE < self.PRICE_FLOOR:
            raise ValueError("INITIAL_PRICE must not be below PRICE_FLOOR")
        return self

    def tick_interval_s(self) -> float:
        """Return the tick cadence in seconds."""

        return self.TICK_INTERVAL_MS / 1000.0

    def ws_push_interval_s(self) -> float:
        """Return the websocket poll cadence in seconds."""

        return self.WS_PUSH_INTERVAL_MS / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings to avoid repeated environment parsing."""

    return Settings()
