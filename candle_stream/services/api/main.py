"""FastAPI dashboard backend serving the live candle series and buy/sell actions."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect

from candle_stream.core.config import Settings, get_settings
from candle_stream.core.logging import configure_logging
from candle_stream.core.types import ServiceMeta
from candle_stream.engine.pipeline import Pipeline, build_pipeline
from candle_stream.engine.sinks import SnapshotSink, serialize_series

logger = logging.getLogger(__name__)


def _series_payload(settings: Settings, sink: SnapshotSink) -> dict[str, Any]:
    return {
        "bucket_width_seconds": settings.BUCKET_WIDTH_SECONDS,
        "version": sink.version,
        "candles": serialize_series(sink.candles),
    }


def _price_payload(price: float) -> dict[str, Any]:
    return {"price": price, "display": f"{price:.2f}"}


def create_app(settings: Settings) -> FastAPI:
    """Build the API app; the lifespan owns the tick loop and stops it on shutdown."""

    meta = ServiceMeta(name=settings.APP_NAME, version=settings.VERSION, env=settings.ENV)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sink = SnapshotSink()
        pipeline = build_pipeline(settings, sink)
        app.state.sink = sink
        app.state.pipeline = pipeline
        pipeline.loop.start()
        logger.info(
            "api_startup",
            extra={
                "service": "api",
                "env": settings.ENV,
                "version": settings.VERSION,
                "bucket_width_seconds": settings.BUCKET_WIDTH_SECONDS,
                "tick_interval_ms": settings.TICK_INTERVAL_MS,
            },
        )
        try:
            yield
        finally:
            await pipeline.loop.stop()
            logger.info("api_shutdown", extra={"ticks": pipeline.loop.ticks})

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Return process liveness status."""

        return {"status": "ok"}

    @app.get("/version")
    def version() -> dict[str, str]:
        """Return application metadata from shared settings."""

        return asdict(meta)

    @app.get("/candles")
    def candles(request: Request) -> dict[str, Any]:
        """Return the current sorted candle series."""

        return _series_payload(settings, request.app.state.sink)

    # Price handlers are async so shocks run on the same loop as the tick task.
    @app.get("/price")
    async def price(request: Request) -> dict[str, Any]:
        """Return the current price for display."""

        pipeline: Pipeline = request.app.state.pipeline
        return _price_payload(pipeline.source.price)

    @app.post("/buy")
    async def buy(request: Request) -> dict[str, Any]:
        """Apply the buy shock and return the new price."""

        pipeline: Pipeline = request.app.state.pipeline
        return _price_payload(pipeline.source.buy())

    @app.post("/sell")
    async def sell(request: Request) -> dict[str, Any]:
        """Apply the sell shock and return the new price."""

        pipeline: Pipeline = request.app.state.pipeline
        return _price_payload(pipeline.source.sell())

    @app.websocket("/ws/candles")
    async def stream_candles(websocket: WebSocket) -> None:
        """Push the full series whenever a fold publishes a new version."""

        await websocket.accept()
        sink: SnapshotSink = websocket.app.state.sink
        sent_version = -1
        try:
            while True:
                if sink.version != sent_version:
                    sent_version = sink.version
                    await websocket.send_json(_series_payload(settings, sink))
                try:
                    await asyncio.wait_for(
                        websocket.receive_text(), timeout=settings.ws_push_interval_s()
                    )
                except asyncio.TimeoutError:
                    continue
        except WebSocketDisconnect:
            logger.info("ws_client_disconnected")

    return app


_settings = get_settings()
configure_logging(_settings.LOG_LEVEL)
app = create_app(_settings)
