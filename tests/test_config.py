"""Settings tests covering defaults and configuration-time validation."""

import pytest
from pydantic import ValidationError

from candle_stream.core.config import Settings


def test_defaults_match_reference_behavior() -> None:
    """Default cadence, bucket width, and multipliers mirror the reference chart."""

    settings = Settings(_env_file=None)

    assert settings.BUCKET_WIDTH_SECONDS == 60
    assert settings.TICK_INTERVAL_MS == 1000
    assert settings.BUY_MULTIPLIER == 1.05
    assert settings.SELL_MULTIPLIER == 0.95
    assert settings.PRICE_FLOOR == 0.0
    assert settings.INITIAL_PRICE == 150.0
    assert settings.tick_interval_s() == 1.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables override defaults."""

    monkeypatch.setenv("BUCKET_WIDTH_SECONDS", "300")
    monkeypatch.setenv("TICK_INTERVAL_MS", "250")

    settings = Settings(_env_file=None)

    assert settings.BUCKET_WIDTH_SECONDS == 300
    assert settings.tick_interval_s() == 0.25


@pytest.mark.parametrize(
    "overrides",
    [
        {"BUCKET_WIDTH_SECONDS": 0},
        {"BUCKET_WIDTH_SECONDS": -60},
        {"TICK_INTERVAL_MS": 0},
        {"BUY_MULTIPLIER": 0.0},
        {"SELL_MULTIPLIER": -0.95},
        {"PRICE_FLOOR": -1.0},
        {"PRICE_FLOOR": 10.0, "INITIAL_PRICE": 5.0},
    ],
)
def test_invalid_settings_are_rejected(overrides: dict[str, float]) -> None:
    """Operator errors fail validation instead of producing degenerate buckets."""

    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)
