from __future__ import annotations

import threading
import time
from typing import Callable

from coinconv.errors import UpstreamFetchFailedError
from coinconv.services.event_log import EventLog, event_log
from coinconv.services.price_table import PriceTable, PriceTableStore, build_price_table


class PriceRefreshWorker:
    """Fetch -> build -> swap, once at start and then once per interval."""

    def __init__(
        self,
        *,
        store: PriceTableStore,
        ticker_client=None,
        base_currency: str = "USDT",
        interval_sec: float = 60.0,
        on_error: Callable[[Exception], None] | None = None,
        log: EventLog | None = None,
    ) -> None:
        self.store = store
        self.ticker_client = ticker_client
        self.base_currency = base_currency.strip().upper()
        self.interval_sec = interval_sec
        self.on_error = on_error
        self.log = log or event_log
        self._refresh_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._metrics = {
            "runs": 0,
            "successes": 0,
            "failures": 0,
        }
        self.last_error: str | None = None
        self.last_success_ts: int | None = None

    def _fetch_and_build(self) -> PriceTable:
        if self.ticker_client is None:
            raise UpstreamFetchFailedError("ticker client is not configured")
        try:
            tickers = self.ticker_client.get_tickers()
            return build_price_table(tickers, self.base_currency)
        except UpstreamFetchFailedError:
            raise
        except Exception as exc:
            raise UpstreamFetchFailedError(f"ticker decode failed: {exc}") from exc

    def refresh_once(self) -> PriceTable:
        with self._refresh_lock:
            self._metrics["runs"] += 1
            try:
                table = self._fetch_and_build()
            except UpstreamFetchFailedError as exc:
                self._metrics["failures"] += 1
                self.last_error = str(exc)
                self.log.emit(
                    "PRICES",
                    "refresh_failed",
                    level="error",
                    error=exc,
                    kept_symbols=len(self.store.snapshot()),
                )
                if self.on_error is not None:
                    self.on_error(exc)
                raise

            self.store.replace(table)
            self._metrics["successes"] += 1
            self.last_error = None
            self.last_success_ts = int(time.time())
            self.log.emit("PRICES", "refreshed", base=self.base_currency, symbols=len(table))
            return table

    def _loop(self) -> None:
        while True:
            try:
                self.refresh_once()
            except UpstreamFetchFailedError:
                # already logged and reported by refresh_once
                pass
            except Exception as exc:  # pragma: no cover
                self.log.emit("PRICES", "worker_error", level="error", error=exc)
            if self._stop_event.wait(self.interval_sec):
                return

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="price-refresh-worker")
        self.log.emit("PRICES", "worker_start", thread=self._thread.name, interval_sec=self.interval_sec)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=1.0)
        self.log.emit("PRICES", "worker_stop", thread="price-refresh-worker")

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def metrics(self) -> dict:
        return {
            **self._metrics,
            "last_error": self.last_error,
            "last_success_ts": self.last_success_ts,
            "symbols": len(self.store.snapshot()),
            "base_currency": self.base_currency,
        }
