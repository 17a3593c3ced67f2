"""Tick loop tests for cadence, tick limits, and explicit cancellation."""

import asyncio

import pytest

from candle_stream.engine.tick_loop import TickLoop
from candle_stream.engine.tick_source import TickSource


def _source() -> TickSource:
    return TickSource(150.0, jitter=0.0)


def test_run_stops_after_max_ticks() -> None:
    """A bounded loop advances the source exactly max_ticks times."""

    source = _source()
    observed: list[float] = []
    source.subscribe(lambda observation: observed.append(observation.price))
    loop = TickLoop(source, interval_s=0.001, max_ticks=3)

    asyncio.run(loop.run(asyncio.Event()))

    assert loop.ticks == 3
    assert observed == [150.0, 150.0, 150.0]


def test_set_shutdown_event_prevents_ticks() -> None:
    """A cancelled token stops the loop before any tick fires."""

    loop = TickLoop(_source(), interval_s=0.001)
    shutdown_event = asyncio.Event()
    shutdown_event.set()

    asyncio.run(loop.run(shutdown_event))

    assert loop.ticks == 0


def test_start_and_stop_release_the_task() -> None:
    """stop() sets the token and waits for the background task to finish."""

    loop = TickLoop(_source(), interval_s=0.001)

    async def scenario() -> None:
        loop.start()
        assert loop.running
        await asyncio.sleep(0.05)
        await loop.stop()
        assert not loop.running
        ticks_at_stop = loop.ticks
        await asyncio.sleep(0.02)
        assert loop.ticks == ticks_at_stop

    asyncio.run(scenario())
    assert loop.ticks > 0


def test_non_positive_interval_is_rejected() -> None:
    """The cadence must be positive."""

    with pytest.raises(ValueError):
        TickLoop(_source(), interval_s=0)
