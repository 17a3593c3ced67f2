"""Chart sink contract plus in-memory and JSONL implementations."""

import json
import sys
from typing import Any, Protocol, Sequence, TextIO

from candle_stream.core.types import Candle


class ChartSink(Protocol):
    """Receives the full candle series, sorted ascending with unique keys."""

    def set_data(self, candles: Sequence[Candle]) -> None: ...


def serialize_series(candles: Sequence[Candle]) -> list[dict[str, Any]]:
    """Convert a candle series to chart-ready records."""

    return [candle.to_chart_point() for candle in candles]


class SnapshotSink:
    """Keeps the latest published series with a monotonically increasing version."""

    def __init__(self) -> None:
        self.version = 0
        self._candles: tuple[Candle, ...] = ()

    @property
    def candles(self) -> tuple[Candle, ...]:
        return self._candles

    def set_data(self, candles: Sequence[Candle]) -> None:
        self._candles = tuple(candles)
        self.version += 1


class JsonlSink:
    """Writes each published series as one compact JSON line."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def set_data(self, candles: Sequence[Candle]) -> None:
        line = json.dumps(
            {"type": "candle_series", "candles": serialize_series(candles)},
            ensure_ascii=True,
            separators=(",", ":"),
        )
        self._stream.write(line + "\n")
        self._stream.flush()
