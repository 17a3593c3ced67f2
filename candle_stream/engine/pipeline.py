"""Wire a TickSource, CandleAggregator and TickLoop from shared settings."""

from dataclasses import dataclass
from typing import Callable

from candle_stream.core.config import Settings
from candle_stream.core.time_utils import epoch_seconds
from candle_stream.engine.aggregator import CandleAggregator
from candle_stream.engine.sinks import ChartSink
from candle_stream.engine.tick_loop import TickLoop
from candle_stream.engine.tick_source import TickSource, UniformSource


@dataclass(slots=True)
class Pipeline:
    """Owned engine state for one chart: source, aggregator and cadence."""

    source: TickSource
    aggregator: CandleAggregator
    loop: TickLoop


def build_pipeline(
    settings: Settings,
    sink: ChartSink,
    *,
    clock: Callable[[], float] = epoch_seconds,
    rng: UniformSource | None = None,
    max_ticks: int = 0,
) -> Pipeline:
    """Seed the series at the current time and subscribe the aggregator to the source."""

    source = TickSource(
        settings.INITIAL_PRICE,
        jitter=settings.PRICE_JITTER,
        price_floor=settings.PRICE_FLOOR,
        buy_multiplier=settings.BUY_MULTIPLIER,
        sell_multiplier=settings.SELL_MULTIPLIER,
        clock=clock,
        rng=rng,
    )
    aggregator = CandleAggregator(
        sink,
        seed_price=source.price,
        seed_time=clock(),
        bucket_width_seconds=settings.BUCKET_WIDTH_SECONDS,
    )
    source.subscribe(aggregator.observe)
    loop = TickLoop(source, settings.tick_interval_s(), max_ticks=max_ticks)
    return Pipeline(source=source, aggregator=aggregator, loop=loop)
