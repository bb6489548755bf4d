from __future__ import annotations

import threading

from coinconv.services.event_log import EventLog, event_log

KNOWN_USAGE_KEYS = frozenset(
    {
        "page_view",
        "convert",
        "swap",
        "select_from",
        "select_to",
        "copy_result",
    }
)


class UsageTracker:
    """Counts front-end usage keys.

    Known keys get their own counter. Anything else is accepted, logged with a
    warning and folded into a single ``unknown`` count so that arbitrary client
    keys never grow the counters.
    """

    def __init__(self, *, known_keys=KNOWN_USAGE_KEYS, log: EventLog | None = None) -> None:
        self.known_keys = frozenset(known_keys)
        self.log = log or event_log
        self._lock = threading.Lock()
        self._known: dict[str, int] = {}
        self._unknown_total = 0

    def record(self, key: str) -> bool:
        normalized = str(key).strip().lower()
        known = normalized in self.known_keys
        with self._lock:
            if known:
                self._known[normalized] = self._known.get(normalized, 0) + 1
            else:
                self._unknown_total += 1
        if known:
            self.log.emit("USAGE", "event", key=normalized)
        else:
            self.log.emit("USAGE", "unknown_key", level="warning", key=normalized)
        return known

    def metrics(self) -> dict:
        with self._lock:
            known = dict(self._known)
            unknown = self._unknown_total
        return {
            "known": known,
            "unknown": unknown,
            "total": sum(known.values()) + unknown,
        }

    def reset(self) -> None:
        with self._lock:
            self._known.clear()
            self._unknown_total = 0


usage_tracker = UsageTracker()
