"""Fold price observations into a sorted, deduplicated series of OHLC candles."""

import logging
import math
from dataclasses import replace

from candle_stream.core.types import Candle, Observation
from candle_stream.engine.sinks import ChartSink

logger = logging.getLogger(__name__)

DEFAULT_BUCKET_WIDTH_SECONDS = 60


def bucket_start(timestamp: float, width: int) -> int:
    """Return the start of the fixed-width bucket containing timestamp."""

    return int(math.floor(timestamp / width)) * width


class CandleAggregator:
    """Maintains the candle series and republishes it after every fold.

    Candles are keyed by ``bucket_start``, so inserting a bucket replaces any
    candle already stored under that key. The published series is re-sorted
    after every fold, including folds into a historical bucket.
    """

    def __init__(
        self,
        sink: ChartSink,
        *,
        seed_price: float,
        seed_time: float,
        bucket_width_seconds: int = DEFAULT_BUCKET_WIDTH_SECONDS,
    ) -> None:
        if bucket_width_seconds <= 0:
            raise ValueError(
                f"bucket_width_seconds must be positive, got {bucket_width_seconds}"
            )

        self.sink = sink
        self.bucket_width_seconds = bucket_width_seconds
        seed_key = bucket_start(seed_time, bucket_width_seconds)
        self._by_bucket: dict[int, Candle] = {
            seed_key: Candle(
                bucket_start=seed_key,
                open=seed_price,
                high=seed_price,
                low=seed_price,
                close=seed_price,
            )
        }
        self._series: tuple[Candle, ...] = ()
        self._publish()

    @property
    def candles(self) -> tuple[Candle, ...]:
        return self._series

    def observe(self, observation: Observation) -> None:
        """Listener adapter for TickSource.subscribe."""

        self.fold(observation.timestamp, observation.price)

    def fold(self, timestamp: float, price: float) -> tuple[Candle, ...]:
        """Fold one observation into its bucket and publish the sorted series.

        Raises ValueError for a NaN or infinite timestamp, which has no bucket.
        """

        if not math.isfinite(timestamp):
            raise ValueError(f"timestamp must be finite, got {timestamp}")

        key = bucket_start(timestamp, self.bucket_width_seconds)
        existing = self._by_bucket.get(key)

        if existing is not None:
            candle = replace(
                existing,
                high=max(existing.high, price),
                low=min(existing.low, price),
                close=price,
            )
            logger.debug("candle_updated", extra={"bucket_start": key, "close": price})
        else:
            open_price = self._series[-1].close
            candle = Candle(
                bucket_start=key,
                open=open_price,
                high=max(open_price, price),
                low=min(open_price, price),
                close=price,
            )
            logger.debug(
                "candle_opened",
                extra={"bucket_start": key, "open": open_price, "close": price},
            )

        self._by_bucket[key] = candle
        return self._publish()

    def _publish(self) -> tuple[Candle, ...]:
        self._series = tuple(sorted(self._by_bucket.values(), key=lambda c: c.bucket_start))
        self.sink.set_data(self._series)
        return self._series
