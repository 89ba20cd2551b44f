"""Activity log sinks for dispatch attempts."""

from __future__ import annotations

import logging
from typing import Protocol

from genclient.dispatch.types import LogEntry, LogStatus

logger = logging.getLogger(__name__)
_activity_logger = logging.getLogger("genclient.activity")


class LogSink(Protocol):
    def add_log_entry(self, entry: LogEntry) -> None: ...


class LoggingLogSink:
    """Writes entries to the ``genclient.activity`` logger."""

    def add_log_entry(self, entry: LogEntry) -> None:
        level = logging.INFO if entry.status == LogStatus.SUCCESS else logging.WARNING
        _activity_logger.log(
            level,
            "[%s] %s: %s",
            entry.model,
            entry.prompt,
            entry.output,
            extra={"operation": entry.model, "log_status": entry.status.value},
        )


class InMemoryLogSink:
    """Keeps entries in memory, newest last."""

    def __init__(self, max_entries: int = 500):
        self.max_entries = max_entries
        self._entries: list[LogEntry] = []

    def add_log_entry(self, entry: LogEntry) -> None:
        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            del self._entries[: len(self._entries) - self.max_entries]

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def errors(self) -> list[LogEntry]:
        return [e for e in self._entries if e.status == LogStatus.ERROR]

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count
