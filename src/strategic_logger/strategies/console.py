"""
Console strategy: writes to stdout/stderr with ANSI color coding.
"""

import sys
from typing import Any, Iterable

from strategic_logger.formatters import CompactFormatter, LogFormatter
from strategic_logger.records import LogEntry, LogEvent, LogLevel
from strategic_logger.strategies.base import LogStrategy, StackTrace


class ConsoleLogEvent(LogEvent):
    """Event whose map view carries the message, for console output."""

    def to_map(self) -> dict[str, Any]:
        data = super().to_map()
        if self.event_message is not None:
            data["event_message"] = self.event_message
        return data


class ConsoleLogStrategy(LogStrategy):
    """
    ERROR+ goes to stderr, everything else to stdout, unless stream pins
    one of them.
    """

    COLORS = {
        10: "\033[36m",      # DEBUG: cyan
        20: "\033[37m",      # INFO: white/default
        30: "\033[33m",      # WARNING: yellow
        40: "\033[31m",      # ERROR: red
        50: "\033[1;91m",    # FATAL: bold bright red
    }
    RESET = "\033[0m"
    STREAMS = ("auto", "stdout", "stderr")

    def __init__(
        self,
        log_level: "LogLevel | int | str" = LogLevel.DEBUG,
        supported_events: Iterable["LogEvent | str"] | None = None,
        name: str | None = None,
        formatter: LogFormatter | None = None,
        color: bool = True,
        stream: str = "auto",
    ):
        super().__init__(log_level, supported_events, name)
        if stream not in self.STREAMS:
            raise ValueError(f"Unknown stream '{stream}'. Expected one of {self.STREAMS}")
        self.formatter = formatter or CompactFormatter()
        self.color = color
        self.stream = stream

    async def log(
        self,
        message: Any = None,
        event: LogEvent | None = None,
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        self.write(LogEntry.create(level, message, event=event))

    async def error(
        self,
        error: Any = None,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
        message: Any = None,
    ) -> None:
        self.write(LogEntry.create(LogLevel.ERROR, message, event, error, stack_trace))

    async def fatal(
        self,
        error: Any = None,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
        message: Any = None,
    ) -> None:
        self.write(LogEntry.create(LogLevel.FATAL, message, event, error, stack_trace))

    def write(self, entry: LogEntry) -> None:
        formatted = self.formatter.format(entry)
        if self.color:
            formatted = f"{self._get_color(entry.level)}{formatted}{self.RESET}"
        print(formatted, file=self._stream_for(entry.level), flush=True)

    def flush(self) -> None:
        sys.stdout.flush()
        sys.stderr.flush()

    def _stream_for(self, level: int):
        if self.stream == "stdout":
            return sys.stdout
        if self.stream == "stderr":
            return sys.stderr
        return sys.stderr if level >= LogLevel.ERROR else sys.stdout

    def _get_color(self, level: int) -> str:
        """Get ANSI color for level, falling back to nearest lower level."""
        if level in self.COLORS:
            return self.COLORS[level]
        for threshold in sorted(self.COLORS.keys(), reverse=True):
            if level >= threshold:
                return self.COLORS[threshold]
        return ""
