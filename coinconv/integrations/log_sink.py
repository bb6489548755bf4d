from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Optional

import requests


class HttpLogSink:
    """Fire-and-forget JSON event shipper for an external log store.

    At most ``max_pending`` events wait for delivery; further events are dropped
    and counted until the backlog drains.
    """

    def __init__(
        self,
        url: str,
        *,
        session: Optional[Any] = None,
        timeout: float = 2.0,
        max_pending: int = 1000,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.url = url
        self.session = session or requests
        self.timeout = timeout
        self.max_pending = max_pending
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="log-sink")
        self._lock = threading.Lock()
        self._pending = 0
        self.sent = 0
        self.failed = 0
        self.dropped = 0

    def _send(self, event: dict) -> None:
        try:
            response = self.session.post(self.url, json=event, timeout=self.timeout)
            response.raise_for_status()
        except Exception as exc:
            self.failed += 1
            print(f"[LOGSINK][send_failed] url={self.url} error={exc}", flush=True)
            return
        self.sent += 1

    def _release(self, _: Future) -> None:
        with self._lock:
            self._pending -= 1

    def record(self, event: dict) -> Future | None:
        with self._lock:
            if self._pending >= self.max_pending:
                self.dropped += 1
                return None
            self._pending += 1
        future = self._executor.submit(self._send, event)
        future.add_done_callback(self._release)
        return future

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    def close(self) -> None:
        self._executor.shutdown(wait=True)
