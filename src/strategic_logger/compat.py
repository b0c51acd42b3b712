"""
Compatibility surface for code written against conventional loggers.

LoggerCompatibility puts level-named methods (debug, info, warning, error,
fatal, verbose, log) in front of a StrategicLogger, each in an awaitable
form and a *_sync form that schedules the dispatch and returns at once.

StrategicLogHandler goes the other way round: a logging.Handler that
feeds records from the standard library into a StrategicLogger.

Usage:
    compat = LoggerCompatibility()            # wraps the default logger
    await compat.warning("disk almost full")
    compat.error_sync("payment failed", exc)  # fire-and-forget
    compat.log_with_context_sync(LogLevel.INFO, "signed in", tag="LOGIN",
                                 context={"user_id": "42"})
"""

import logging
from typing import Any, Awaitable, Mapping

from strategic_logger.core import StrategicLogger
from strategic_logger.records import LogEvent, LogLevel
from strategic_logger.strategies.base import StackTrace

_DIAGNOSTIC_NAMESPACE = "strategic_logger"


class LoggerCompatibility:
    """Level-named logging API over a StrategicLogger."""

    def __init__(self, logger: StrategicLogger | None = None):
        self._logger = logger

    @property
    def logger(self) -> StrategicLogger:
        # Resolved lazily so a reset default instance is picked up
        return self._logger or StrategicLogger.instance()

    # ── Awaitable API ─────────────────────────────────────────────

    def debug(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        return self.log_with_level(LogLevel.DEBUG, message, error, stack_trace)

    def info(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        return self.log_with_level(LogLevel.INFO, message, error, stack_trace)

    def warning(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        return self.log_with_level(LogLevel.WARNING, message, error, stack_trace)

    def error(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        return self.log_with_level(LogLevel.ERROR, message, error, stack_trace)

    def fatal(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        return self.log_with_level(LogLevel.FATAL, message, error, stack_trace)

    def verbose(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        """Alias for debug."""
        return self.debug(message, error, stack_trace)

    def log(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> Awaitable[None]:
        """Alias for info."""
        return self.info(message, error, stack_trace)

    def log_with_level(
        self,
        level: LogLevel | int | str,
        message: Any,
        error: Any = None,
        stack_trace: StackTrace = None,
    ) -> Awaitable[None]:
        level = LogLevel.from_value(level)
        if level == LogLevel.NONE:
            return _done()
        return self.logger.emit(level, message, error=error, stack_trace=stack_trace)

    def log_with_context(
        self,
        level: LogLevel | int | str,
        message: Any,
        context: Mapping[str, Any] | None = None,
        event: LogEvent | None = None,
        tag: str | None = None,
        error: Any = None,
        stack_trace: StackTrace = None,
    ) -> Awaitable[None]:
        """
        Log with an event. Without an explicit one, the event is built from
        tag (default: the level name), the message and context.
        """
        level = LogLevel.from_value(level)
        if level == LogLevel.NONE:
            return _done()
        event = event or _context_event(level, message, context, tag)
        return self.logger.emit(level, message, event=event, error=error, stack_trace=stack_trace)

    # ── Structured helpers ────────────────────────────────────────

    def log_structured(
        self,
        level: LogLevel | int | str,
        message: Any,
        data: Mapping[str, Any] | None = None,
        tag: str | None = None,
    ) -> Awaitable[None]:
        return self.log_with_context(level, message, context=data, tag=tag or "LOG")

    def log_error(
        self,
        error: Any,
        stack_trace: StackTrace = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Awaitable[None]:
        text = message or str(error)
        return self.log_with_context(
            LogLevel.ERROR, text, context=context, tag="ERROR", error=error, stack_trace=stack_trace
        )

    def log_fatal(
        self,
        error: Any,
        stack_trace: StackTrace = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> Awaitable[None]:
        text = message or str(error)
        return self.log_with_context(
            LogLevel.FATAL, text, context=context, tag="FATAL", error=error, stack_trace=stack_trace
        )

    def log_warning(self, message: Any, context: Mapping[str, Any] | None = None, tag: str | None = None) -> Awaitable[None]:
        return self.log_with_context(LogLevel.WARNING, message, context=context, tag=tag or "WARNING")

    def log_info(self, message: Any, context: Mapping[str, Any] | None = None, tag: str | None = None) -> Awaitable[None]:
        return self.log_with_context(LogLevel.INFO, message, context=context, tag=tag or "INFO")

    def log_debug(self, message: Any, context: Mapping[str, Any] | None = None, tag: str | None = None) -> Awaitable[None]:
        return self.log_with_context(LogLevel.DEBUG, message, context=context, tag=tag or "DEBUG")

    # ── Synchronous API ───────────────────────────────────────────
    # Never block on the fan-out. Only NotInitializedError escapes.

    def debug_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.log_with_level_sync(LogLevel.DEBUG, message, error, stack_trace)

    def info_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.log_with_level_sync(LogLevel.INFO, message, error, stack_trace)

    def warning_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.log_with_level_sync(LogLevel.WARNING, message, error, stack_trace)

    def error_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.log_with_level_sync(LogLevel.ERROR, message, error, stack_trace)

    def fatal_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.log_with_level_sync(LogLevel.FATAL, message, error, stack_trace)

    def verbose_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.debug_sync(message, error, stack_trace)

    def log_sync(self, message: Any, error: Any = None, stack_trace: StackTrace = None) -> None:
        self.info_sync(message, error, stack_trace)

    def log_with_level_sync(
        self,
        level: LogLevel | int | str,
        message: Any,
        error: Any = None,
        stack_trace: StackTrace = None,
    ) -> None:
        level = LogLevel.from_value(level)
        if level == LogLevel.NONE:
            return
        self.logger.submit(level, message, error=error, stack_trace=stack_trace)

    def log_with_context_sync(
        self,
        level: LogLevel | int | str,
        message: Any,
        context: Mapping[str, Any] | None = None,
        event: LogEvent | None = None,
        tag: str | None = None,
        error: Any = None,
        stack_trace: StackTrace = None,
    ) -> None:
        level = LogLevel.from_value(level)
        if level == LogLevel.NONE:
            return
        event = event or _context_event(level, message, context, tag)
        self.logger.submit(level, message, event=event, error=error, stack_trace=stack_trace)


class StrategicLogHandler(logging.Handler):
    """
    Forward stdlib logging records to a StrategicLogger.

    A LogEvent passed as extra={"log_event": ...} travels with the record.
    Dispatch is scheduled, never awaited, so emit() returns immediately.
    """

    def __init__(self, logger: StrategicLogger | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._logger = logger

    @property
    def logger(self) -> StrategicLogger:
        return self._logger or StrategicLogger.instance()

    def emit(self, record: logging.LogRecord) -> None:
        # The facade's own diagnostics would feed straight back into it
        if record.name == _DIAGNOSTIC_NAMESPACE or record.name.startswith(_DIAGNOSTIC_NAMESPACE + "."):
            return
        try:
            message = self.format(record) if self.formatter else record.getMessage()
            error = stack_trace = None
            if record.exc_info and record.exc_info[1] is not None:
                error = record.exc_info[1]
                stack_trace = record.exc_info[2]
            event = getattr(record, "log_event", None)
            if not isinstance(event, LogEvent):
                event = None
            self.logger.submit(
                LogLevel.from_python(record.levelno),
                message,
                event=event,
                error=error,
                stack_trace=stack_trace,
            )
        except Exception:
            self.handleError(record)


def _context_event(
    level: LogLevel,
    message: Any,
    context: Mapping[str, Any] | None,
    tag: str | None,
) -> LogEvent:
    return LogEvent(
        event_name=tag or level.name,
        event_message=None if message is None else str(message),
        parameters=context or {},
    )


async def _done() -> None:
    return None
