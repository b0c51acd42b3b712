"""
In-memory strategy: ring buffer of the last N entries.

Useful for tests and for inspecting recent activity in-process. Does not
grow unbounded and is not a persistence layer.
"""

import threading
from collections import deque
from typing import Any, Iterable

from strategic_logger.records import LogEntry, LogEvent, LogLevel
from strategic_logger.strategies.base import LogStrategy, StackTrace


class MemoryLogStrategy(LogStrategy):

    def __init__(
        self,
        log_level: "LogLevel | int | str" = LogLevel.DEBUG,
        supported_events: Iterable["LogEvent | str"] | None = None,
        name: str | None = None,
        capacity: int = 10000,
    ):
        super().__init__(log_level, supported_events, name)
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._buffer: deque[LogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    async def log(
        self,
        message: Any = None,
        event: LogEvent | None = None,
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        self.append(LogEntry.create(level, message, event=event))

    async def error(
        self,
        error: Any = None,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
        message: Any = None,
    ) -> None:
        self.append(LogEntry.create(LogLevel.ERROR, message, event, error, stack_trace))

    async def fatal(
        self,
        error: Any = None,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
        message: Any = None,
    ) -> None:
        self.append(LogEntry.create(LogLevel.FATAL, message, event, error, stack_trace))

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self._buffer.append(entry)

    def get_recent(self, n: int = 100, event_name: str | None = None) -> list[LogEntry]:
        """Most recent entries, oldest first, optionally filtered by event name."""
        with self._lock:
            entries = list(self._buffer)

        if event_name:
            entries = [e for e in entries if e.event is not None and e.event.event_name == event_name]

        return entries[-n:] if n > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    @property
    def capacity(self) -> int:
        return self._buffer.maxlen

    @property
    def count(self) -> int:
        return len(self._buffer)
