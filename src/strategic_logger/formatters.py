"""
Log formatters.

Each strategy can use a different formatter:
  - compact:  "{timestamp:%H:%M:%S} [{level_name:>8}] {text}"
  - detailed: "{timestamp} [{level_name}] [{event_name}] {text} | params | error"
  - json:     Structured JSON for machine parsing
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from strategic_logger.records import LogEntry, describe_error


class LogFormatter(ABC):
    """Base formatter. Transforms LogEntry → string."""

    @abstractmethod
    def format(self, entry: LogEntry) -> str: ...


class CompactFormatter(LogFormatter):
    """
    Compact single-line format for terminal display.
    Example: 14:32:05 [    INFO] Application started
    """

    def format(self, entry: LogEntry) -> str:
        ts = entry.timestamp.strftime("%H:%M:%S")
        return f"{ts} [{entry.level_name:>8}] {entry.text}"


class DetailedFormatter(LogFormatter):
    """
    Detailed format with event, parameters and error.
    Example: 2026-02-12 14:32:05.123456 [   ERROR] [checkout] Payment declined | order_id=17 | error=ValueError: card
    """

    def format(self, entry: LogEntry) -> str:
        ts = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")
        event_name = entry.event.event_name if entry.event else "-"

        parts = [f"{ts} [{entry.level_name:>8}] [{event_name}]", entry.text]

        if entry.event and entry.event.parameters:
            params_str = " ".join(
                f"{k}={_format_value(v)}" for k, v in entry.event.parameters.items()
            )
            parts.append(f"| {params_str}")

        # Error already shown as the text when there is no message
        if entry.error is not None and entry.message is not None:
            parts.append(f"| error={describe_error(entry.error)}")

        line = " ".join(parts)
        stack = entry.formatted_stack_trace
        if stack:
            line = f"{line}\n{stack.rstrip()}"
        return line


class JsonFormatter(LogFormatter):
    """
    Structured JSON for machine parsing.
    One JSON object per line.
    """

    def format(self, entry: LogEntry) -> str:
        obj: dict[str, Any] = {
            "timestamp": entry.timestamp.isoformat(),
            "level": entry.level,
            "level_name": entry.level_name,
            "message": entry.text,
        }
        if entry.event is not None:
            obj["event"] = _serialize_value(entry.event.to_map())
        if entry.error is not None:
            obj["error"] = describe_error(entry.error)
        stack = entry.formatted_stack_trace
        if stack:
            obj["stack_trace"] = stack
        return json.dumps(obj, default=str)


FORMATTERS: dict[str, type[LogFormatter]] = {
    "compact": CompactFormatter,
    "detailed": DetailedFormatter,
    "json": JsonFormatter,
}


def get_formatter(name: str) -> LogFormatter:
    """Instantiate a formatter by name."""
    try:
        return FORMATTERS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown formatter '{name}'. Available: {', '.join(FORMATTERS)}"
        )


def _format_value(v: Any) -> str:
    """Format a parameter value for detailed display."""
    if isinstance(v, float):
        return f"{v:.4f}"
    return str(v)


def _serialize_value(v: Any) -> Any:
    """Make a value JSON-serializable."""
    if isinstance(v, (str, int, float, bool, type(None))):
        return v
    if isinstance(v, (list, tuple)):
        return [_serialize_value(i) for i in v]
    if isinstance(v, dict):
        return {str(k): _serialize_value(val) for k, val in v.items()}
    return str(v)
