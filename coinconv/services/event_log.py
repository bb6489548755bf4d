from __future__ import annotations

import time
from typing import Any


class EventLog:
    """Tagged console log lines, optionally mirrored to an external sink."""

    def __init__(self, sink: Any | None = None) -> None:
        self.sink = sink

    def set_sink(self, sink: Any | None) -> None:
        self.sink = sink

    @staticmethod
    def format_line(channel: str, event: str, level: str, fields: dict) -> str:
        parts = [f"[{channel}][{event}]"]
        if level != "info":
            parts.append(f"level={level}")
        parts.extend(f"{key}={value}" for key, value in fields.items())
        return " ".join(parts)

    def emit(self, channel: str, event: str, *, level: str = "info", **fields: Any) -> str:
        line = self.format_line(channel, event, level, fields)
        print(line, flush=True)
        if self.sink is not None:
            self.sink.record(
                {
                    "channel": channel,
                    "event": event,
                    "level": level,
                    "ts": int(time.time()),
                    "fields": {key: _jsonable(value) for key, value in fields.items()},
                }
            )
        return line


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return str(value)


event_log = EventLog()
