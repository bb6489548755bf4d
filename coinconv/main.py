from __future__ import annotations

import os
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from coinconv.api.routes import router
from coinconv.config.settings import DEFAULT_STATIC_DIR, get_settings
from coinconv.errors import ConversionError
from coinconv.integrations.log_sink import HttpLogSink
from coinconv.integrations.ticker_rest import TickerRestClient
from coinconv.schemas.convert import ErrorBody
from coinconv.services.converter import conversion_service
from coinconv.services.event_log import event_log
from coinconv.services.price_refresh import PriceRefreshWorker
from coinconv.services.price_table import price_table_store
from coinconv.services.usage import usage_tracker


def _bind_runtime_clients(app: FastAPI) -> None:
    settings = app.state.get_settings()
    worker = app.state.refresh_worker
    worker.base_currency = settings.BASE_CURRENCY
    worker.interval_sec = settings.REFRESH_INTERVAL_SEC
    if worker.ticker_client is None:
        worker.ticker_client = TickerRestClient(
            settings.TICKER_URL,
            timeout=settings.TICKER_TIMEOUT_SEC,
        )
    if settings.LOG_SINK_URL and event_log.sink is None:
        event_log.set_sink(HttpLogSink(settings.LOG_SINK_URL))
        app.state.owned_log_sink = event_log.sink


@asynccontextmanager
async def lifespan(app: FastAPI):
    _bind_runtime_clients(app)
    worker = app.state.refresh_worker
    worker.start()
    try:
        yield
    finally:
        worker.stop()
        sink = getattr(app.state, "owned_log_sink", None)
        if sink is not None:
            event_log.set_sink(None)
            app.state.owned_log_sink = None
            sink.close()


app = FastAPI(title="Coin Converter", version="0.1.0", lifespan=lifespan)
app.include_router(router, prefix="/api")


@app.exception_handler(ConversionError)
async def conversion_error_handler(request: Request, exc: ConversionError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=ErrorBody(error=exc.message).model_dump())


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    event_log.emit(
        "HTTP",
        "request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response


# NOTE: runtime clients are bound in lifespan so tests can swap them before startup.
app.state.get_settings = get_settings
app.state.price_table_store = price_table_store
app.state.conversion_service = conversion_service
app.state.usage_tracker = usage_tracker
app.state.refresh_worker = PriceRefreshWorker(store=price_table_store)
app.state.owned_log_sink = None

# read directly so a bad env value elsewhere does not break import
_static_dir = os.getenv("STATIC_DIR") or DEFAULT_STATIC_DIR
if os.path.isdir(_static_dir):
    # mounted last so /api routes take precedence
    app.mount("/", StaticFiles(directory=_static_dir, html=True), name="static")


def run() -> None:
    settings = get_settings()
    event_log.emit("APP", "start", host=settings.HOST, port=settings.PORT, base=settings.BASE_CURRENCY)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level="info")


if __name__ == "__main__":
    run()
