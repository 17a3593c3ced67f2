"""Headless simulator that streams the candle series to stdout as JSONL."""

import asyncio
import logging
import signal

from pydantic import ValidationError

from candle_stream.core.config import get_settings
from candle_stream.core.logging import configure_logging
from candle_stream.engine.pipeline import build_pipeline
from candle_stream.engine.sinks import JsonlSink


def _request_shutdown(
    shutdown_event: asyncio.Event, logger: logging.Logger, signal_name: str
) -> None:
    if shutdown_event.is_set():
        return
    logger.info("simulator_shutdown_signal", extra={"signal": signal_name})
    shutdown_event.set()


def _install_signal_handlers(shutdown_event: asyncio.Event, logger: logging.Logger) -> None:
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(
                sig,
                _request_shutdown,
                shutdown_event,
                logger,
                sig.name,
            )
        except NotImplementedError:
            signal_name = sig.name
            signal.signal(
                sig,
                lambda *_, signal_name=signal_name: _request_shutdown(
                    shutdown_event, logger, signal_name
                ),
            )


async def _run() -> int:
    logger = logging.getLogger(__name__)
    try:
        settings = get_settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("simulator_invalid_settings", extra={"error": str(exc)})
        return 1
    configure_logging(settings.LOG_LEVEL)
    shutdown_event = asyncio.Event()

    pipeline = build_pipeline(settings, JsonlSink(), max_ticks=settings.SIMULATOR_MAX_TICKS)
    _install_signal_handlers(shutdown_event, logger)
    logger.info(
        "simulator_startup",
        extra={
            "initial_price": settings.INITIAL_PRICE,
            "bucket_width_seconds": settings.BUCKET_WIDTH_SECONDS,
            "tick_interval_ms": settings.TICK_INTERVAL_MS,
            "max_ticks": settings.SIMULATOR_MAX_TICKS,
        },
    )

    await pipeline.loop.run(shutdown_event)

    logger.info(
        "simulator_shutdown",
        extra={"ticks": pipeline.loop.ticks, "candles": len(pipeline.aggregator.candles)},
    )
    return 0


def main() -> int:
    """Run the simulator until interrupted or the tick limit is reached."""

    try:
        return asyncio.run(_run())
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
