"""Cooperative asyncio cadence that drives a TickSource until cancelled."""

import asyncio
import logging

from candle_stream.engine.tick_source import TickSource

logger = logging.getLogger(__name__)


class TickLoop:
    """Calls ``source.advance()`` every ``interval_s`` seconds.

    The shutdown event is the cancellation token: setting it stops the loop
    before the next tick fires. Owners must call ``stop()`` on teardown.
    """

    def __init__(self, source: TickSource, interval_s: float, max_ticks: int = 0) -> None:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self.source = source
        self.interval_s = interval_s
        self.max_ticks = max(0, max_ticks)
        self.ticks = 0
        self._shutdown_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Tick until shutdown_event is set or max_ticks is reached."""

        logger.info(
            "tick_loop_started",
            extra={"interval_s": self.interval_s, "max_ticks": self.max_ticks},
        )
        while not shutdown_event.is_set():
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=self.interval_s)
            except asyncio.TimeoutError:
                self.source.advance()
                self.ticks += 1
                if self.max_ticks and self.ticks >= self.max_ticks:
                    break
        logger.info("tick_loop_stopped", extra={"ticks": self.ticks})

    def start(self) -> None:
        """Spawn the tick task on the running event loop."""

        if self.running:
            return
        self._shutdown_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(self._shutdown_event))

    async def stop(self) -> None:
        """Signal the cancellation token and wait for the tick task to exit."""

        if self._shutdown_event is not None:
            self._shutdown_event.set()
        if self._task is not None:
            await self._task
        self._task = None
        self._shutdown_event = None
