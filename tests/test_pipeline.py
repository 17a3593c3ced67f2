"""Pipeline wiring tests: seed, subscription, and shocks carried into candles."""

import pytest

from candle_stream.core.config import Settings
from candle_stream.core.types import Candle
from candle_stream.engine.pipeline import build_pipeline
from candle_stream.engine.sinks import SnapshotSink


class FixedRng:
    def __init__(self, *deltas: float) -> None:
        self._deltas = list(deltas)

    def uniform(self, a: float, b: float) -> float:
        return self._deltas.pop(0)


class StepClock:
    def __init__(self, start: float = 0.0, step: float = 1.0) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


def test_pipeline_seeds_series_from_settings() -> None:
    """The seed candle uses the initial price at the current bucket."""

    settings = Settings(_env_file=None, INITIAL_PRICE=120.0, TICK_INTERVAL_MS=500)
    sink = SnapshotSink()

    pipeline = build_pipeline(settings, sink, clock=StepClock(start=75.0))

    seed = Candle(bucket_start=60, open=120.0, high=120.0, low=120.0, close=120.0)
    assert pipeline.aggregator.candles == (seed,)
    assert sink.candles == (seed,)
    assert pipeline.loop.interval_s == 0.5


def test_shock_reaches_aggregator_through_next_tick() -> None:
    """After a buy, the next tick folds the shocked price plus the delta."""

    settings = Settings(_env_file=None)
    sink = SnapshotSink()
    pipeline = build_pipeline(settings, sink, clock=StepClock(), rng=FixedRng(0.25))

    pipeline.source.buy()
    assert sink.version == 1

    pipeline.source.advance()

    latest = pipeline.aggregator.candles[-1]
    assert sink.version == 2
    assert latest.bucket_start == 0
    assert latest.open == 150.0
    assert latest.close == pytest.approx(157.75)
    assert latest.high == pytest.approx(157.75)


def test_ticks_in_a_new_bucket_open_at_previous_close() -> None:
    """A tick past the bucket boundary appends a candle opening at the prior close."""

    settings = Settings(_env_file=None)
    sink = SnapshotSink()
    pipeline = build_pipeline(
        settings, sink, clock=StepClock(step=40.0), rng=FixedRng(1.0, -0.5)
    )

    pipeline.source.advance()
    pipeline.source.advance()

    assert sink.candles == (
        Candle(bucket_start=0, open=150.0, high=151.0, low=150.0, close=151.0),
        Candle(bucket_start=60, open=151.0, high=151.0, low=150.5, close=150.5),
    )
