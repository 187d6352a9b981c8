from __future__ import annotations

import json
import os
import sys
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, TextIO


LEVELS = ("debug", "info", "warn", "error")


class Telemetry(Protocol):
    """Sink for mission events, injected into every simulator component."""

    def log_event(self, level: str, event: str, **fields: Any) -> None:
        ...


class NullTelemetry:
    """Telemetry sink that drops every event."""

    def log_event(self, level: str, event: str, **fields: Any) -> None:
        return None


class MemoryTelemetry:
    """Keeps event records in memory (tests, in-process inspection)."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def log_event(self, level: str, event: str, **fields: Any) -> None:
        self.records.append({"level": level, "event": event, **fields})

    def events(self, level: Optional[str] = None) -> List[str]:
        return [r["event"] for r in self.records if level is None or r["level"] == level]


class TelemetryLogger:
    """Structured JSONL logger for mission telemetry.

    Thread-safe, append-only logging of event records, one JSON object per line.
    With ``echo`` enabled every event is also printed to stderr as
    ``<timestamp> [LEVEL]: <event>``.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        echo: bool = False,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.path = path
        self.echo = echo
        self.stream = stream if stream is not None else sys.stderr
        self._lock = threading.Lock()
        self._fp: Optional[TextIO] = None
        if self.path is not None:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            self._fp = open(self.path, "a", encoding="utf-8")

    def log_event(self, level: str, event: str, **fields: Any) -> None:
        """Append a single event record to the JSONL file (and echo it)."""
        if level not in LEVELS:
            raise ValueError(f"Unknown telemetry level: {level}")
        ts = datetime.now().isoformat(timespec="seconds")
        record: Dict[str, Any] = {"ts": ts, "level": level, "event": event}
        record.update(fields)
        line = json.dumps(record, separators=(",", ":"), default=str)
        with self._lock:
            if self._fp is not None:
                self._fp.write(line + "\n")
                self._fp.flush()
            if self.echo:
                self.stream.write(f"{ts.replace('T', ' ')} [{level.upper()}]: {event}\n")

    def close(self) -> None:
        if self._fp is not None:
            self._fp.close()
            self._fp = None

    def __enter__(self) -> "TelemetryLogger":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def read_events(path: str) -> List[Dict[str, Any]]:
    """Load every record from a JSONL telemetry file."""
    records: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))
    return records
