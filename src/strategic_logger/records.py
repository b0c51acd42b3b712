"""
Log levels, events and entries.

LogLevel values are Python-logging compatible so thresholds read the same
on both sides of the stdlib bridge. NONE is a threshold, never a level a
call is emitted at.
"""

import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from types import MappingProxyType, TracebackType
from typing import Any, Mapping


class LogLevel(IntEnum):
    """Severity levels, ascending. NONE deactivates whatever it is set on."""
    NONE = 0
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    FATAL = 50

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.strip().upper()
        if name_upper == "CRITICAL":
            return cls.FATAL
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            )

    @classmethod
    def from_value(cls, value: "int | str | LogLevel") -> "LogLevel":
        """Resolve level from a LogLevel, an exact int value or a name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, int) and not isinstance(value, bool):
            for member in cls:
                if member.value == value:
                    return member
            raise ValueError(
                f"No log level with value {value}. "
                f"Valid values: {', '.join(f'{m.name}={m.value}' for m in cls)}"
            )
        raise TypeError(f"Expected int or str, got {type(value).__name__}")

    @classmethod
    def from_python(cls, levelno: int) -> "LogLevel":
        """Map a stdlib logging level number to the nearest level at or above it."""
        if levelno <= logging.DEBUG:
            return cls.DEBUG
        if levelno <= logging.INFO:
            return cls.INFO
        if levelno <= logging.WARNING:
            return cls.WARNING
        if levelno <= logging.ERROR:
            return cls.ERROR
        return cls.FATAL


LEVEL_NAMES: dict[int, str] = {member.value: member.name for member in LogLevel}


def level_name(level: int) -> str:
    """Get display name for a level value. Falls back to numeric string."""
    return LEVEL_NAMES.get(level, str(level))


@dataclass(frozen=True, eq=False)
class LogEvent:
    """
    A named, loggable occurrence.

    Identity is the event name alone: two events with the same name are
    equal whatever their message or parameters, so strategies can match
    and dedupe on it.

    Example:
        LogEvent("user_login", "User logged in", {"user_id": "42"})
    """
    event_name: str
    event_message: str | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.event_name, str) or not self.event_name:
            raise ValueError("event_name must be a non-empty string")
        object.__setattr__(
            self, "parameters", MappingProxyType(dict(self.parameters or {}))
        )

    def to_map(self) -> dict[str, Any]:
        """Plain dict view. Subclasses tailor this for their strategy."""
        return {"event_name": self.event_name, "parameters": dict(self.parameters)}

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, LogEvent):
            return NotImplemented
        return self.event_name == other.event_name

    def __hash__(self) -> int:
        return hash(self.event_name)


@dataclass(frozen=True)
class LogEntry:
    """
    Immutable record of one sink call, built by a strategy for its formatter.
    """
    timestamp: datetime
    level: int
    level_name: str
    message: str | None = None
    event: LogEvent | None = None
    error: Any = None
    stack_trace: TracebackType | str | None = None

    @classmethod
    def create(
        cls,
        level: int,
        message: Any = None,
        event: LogEvent | None = None,
        error: Any = None,
        stack_trace: TracebackType | str | None = None,
    ) -> "LogEntry":
        """Factory with auto-timestamp; borrows the exception's traceback when none given."""
        if stack_trace is None and isinstance(error, BaseException):
            stack_trace = error.__traceback__
        return cls(
            timestamp=datetime.now(timezone.utc),
            level=level,
            level_name=level_name(level),
            message=None if message is None else str(message),
            event=event,
            error=error,
            stack_trace=stack_trace,
        )

    @property
    def text(self) -> str:
        """Message, falling back to the error, then the event message."""
        if self.message is not None:
            return self.message
        if self.error is not None:
            return describe_error(self.error)
        if self.event is not None and self.event.event_message:
            return self.event.event_message
        return ""

    @property
    def formatted_stack_trace(self) -> str | None:
        return format_stack_trace(self.stack_trace)


def describe_error(error: Any) -> str:
    if isinstance(error, BaseException):
        return f"{type(error).__name__}: {error}"
    return str(error)


def format_stack_trace(stack_trace: TracebackType | str | None) -> str | None:
    """Render a traceback object; strings pass through."""
    if stack_trace is None:
        return None
    if isinstance(stack_trace, str):
        return stack_trace
    return "".join(traceback.format_tb(stack_trace))
