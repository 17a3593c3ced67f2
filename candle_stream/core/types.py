"""Shared lightweight types to keep module interfaces explicit and typed."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ServiceMeta:
    """Metadata describing a running service instance."""

    name: str
    version: str
    env: str


@dataclass(frozen=True, slots=True)
class Observation:
    """One price sample emitted by the tick source."""

    timestamp: float
    price: float


@dataclass(frozen=True, slots=True)
class Candle:
    """OHLC aggregate over one fixed-width time bucket keyed by bucket_start."""

    bucket_start: int
    open: float
    high: float
    low: float
    close: float

    def to_chart_point(self) -> dict[str, Any]:
        """Return the record shape consumed by candlestick chart renderers."""

        return {
            "time": self.bucket_start,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }
