"""
Strategy contract.

A strategy is one output destination. The dispatcher asks should_log()
first and only then calls log(), error() or fatal(), depending on the
severity of the call.
"""

import re
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any, Iterable

from strategic_logger.records import LogEvent, LogLevel

StackTrace = TracebackType | str | None


class LogStrategy(ABC):
    """
    Base strategy.

    log_level is the minimum severity this strategy handles; NONE turns it
    off. supported_events, when non-empty, restricts the strategy to calls
    carrying one of those events (matched by event name).
    """

    def __init__(
        self,
        log_level: "LogLevel | int | str" = LogLevel.DEBUG,
        supported_events: Iterable["LogEvent | str"] | None = None,
        name: str | None = None,
    ):
        self.name = name or _default_name(type(self).__name__)
        self.log_level = log_level
        self.supported_events = supported_events

    @property
    def log_level(self) -> LogLevel:
        return self._log_level

    @log_level.setter
    def log_level(self, value: "LogLevel | int | str") -> None:
        self._log_level = LogLevel.from_value(value)

    @property
    def supported_events(self) -> frozenset[str]:
        return self._supported_events

    @supported_events.setter
    def supported_events(self, value: Iterable["LogEvent | str"] | None) -> None:
        self._supported_events = _event_names(value)

    def should_log(self, event: LogEvent | None = None, level: "LogLevel | None" = None) -> bool:
        """
        Gate evaluated before any I/O. Pure: no side effects.

        An event-restricted strategy never matches a call without an event.
        """
        if self.log_level == LogLevel.NONE:
            return False
        if level is not None and (level == LogLevel.NONE or level < self.log_level):
            return False
        if self.supported_events:
            return event is not None and event.event_name in self.supported_events
        return True

    @abstractmethod
    async def log(
        self,
        message: Any = None,
        event: LogEvent | None = None,
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        """Write an informational (DEBUG/INFO/WARNING) call."""
        ...

    @abstractmethod
    async def error(
        self,
        error: Any = None,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
        message: Any = None,
    ) -> None:
        """Write an ERROR call."""
        ...

    @abstractmethod
    async def fatal(
        self,
        error: Any = None,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
        message: Any = None,
    ) -> None:
        """Write a FATAL call."""
        ...

    def flush(self) -> None:
        """Flush any buffered output. Override in buffered strategies."""
        pass

    def close(self) -> None:
        """Cleanup. Override if the strategy holds resources."""
        self.flush()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, log_level={self.log_level.name})"


def _default_name(class_name: str) -> str:
    """ConsoleLogStrategy -> console, RemoteSink -> remote_sink."""
    base = re.sub(r"(Log)?Strategy$", "", class_name) or class_name
    return re.sub(r"(?<!^)(?=[A-Z])", "_", base).lower()


def _event_names(events: Iterable["LogEvent | str"] | None) -> frozenset[str]:
    if not events:
        return frozenset()
    if isinstance(events, (str, LogEvent)):
        events = [events]
    return frozenset(e.event_name if isinstance(e, LogEvent) else str(e) for e in events)
