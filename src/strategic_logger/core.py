"""
StrategicLogger: one entry point, many output strategies.

A logger starts uninitialized. initialize() attaches strategies and a
global threshold exactly once; every dispatch before that raises
NotInitializedError, a second initialize() raises AlreadyInitializedError.

Each call is checked against the global threshold, then against every
strategy's own gate, and only then fanned out. A strategy that raises is
reported on the diagnostic channel and skipped; the caller never sees it.
"""

import asyncio
import inspect
import logging
import threading
from collections import deque
from typing import Any, Awaitable, Callable, Iterable, Optional

from strategic_logger.errors import (
    AlreadyInitializedError,
    NotInitializedError,
    StrategyFailure,
)
from strategic_logger.records import LogEvent, LogLevel, level_name
from strategic_logger.scheduling import BackgroundRunner
from strategic_logger.strategies.base import LogStrategy, StackTrace
from strategic_logger.strategies.console import ConsoleLogStrategy

logger = logging.getLogger(__name__)

FailureHook = Callable[[StrategyFailure], None]


class StrategicLogger:
    """
    Dispatcher over a list of LogStrategy objects.

    Usage:
        log = StrategicLogger()
        log.initialize([ConsoleLogStrategy()], level=LogLevel.INFO)
        await log.log("Application started")
        await log.error(exc, event=LogEvent("checkout_failed"))

    StrategicLogger.instance() gives the conventional process-wide default;
    any number of independent loggers can be constructed alongside it.
    """

    _instance: Optional["StrategicLogger"] = None
    _lock = threading.Lock()

    # Re-export levels for convenience: StrategicLogger.DEBUG, etc.
    NONE = LogLevel.NONE
    DEBUG = LogLevel.DEBUG
    INFO = LogLevel.INFO
    WARNING = LogLevel.WARNING
    ERROR = LogLevel.ERROR
    FATAL = LogLevel.FATAL

    def __init__(self, on_failure: FailureHook | None = None, failure_history: int = 100) -> None:
        self._strategies: tuple[LogStrategy, ...] = ()
        self._level: LogLevel = LogLevel.NONE
        self._ready = threading.Event()
        self._config_lock = threading.Lock()
        self._runner = BackgroundRunner()
        self._failures: deque[StrategyFailure] = deque(maxlen=failure_history)
        self.on_failure = on_failure

    @classmethod
    def instance(cls) -> "StrategicLogger":
        """Get or create the default instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """
        Drop the default instance. For testing only.
        Closes its strategies and background thread first.
        """
        with cls._lock:
            if cls._instance is not None:
                cls._instance.close()
                cls._instance = None

    # ── Initialization ────────────────────────────────────────────

    def initialize(
        self,
        strategies: Iterable[LogStrategy] | None = None,
        level: LogLevel | int | str = LogLevel.NONE,
    ) -> "StrategicLogger":
        """
        Attach strategies and set the global threshold. Valid once.

        Raises AlreadyInitializedError on a second call; use reconfigure()
        to replace the setup of a live logger.

        Strategies attached earlier with add_strategy() are kept, ahead of
        the ones passed here.
        """
        with self._config_lock:
            if self._ready.is_set():
                raise AlreadyInitializedError()
            self._apply((*self._strategies, *(strategies or ())), level)
            # Published last: emitters never see a half-built logger
            self._ready.set()
        self._log_banner(reconfigured=False)
        return self

    init = initialize

    def reconfigure(
        self,
        strategies: Iterable[LogStrategy] | None = None,
        level: LogLevel | int | str = LogLevel.NONE,
    ) -> "StrategicLogger":
        """
        Replace strategies and threshold, initialized or not.

        Replaced strategies that are not part of the new setup are closed.
        """
        with self._config_lock:
            was_initialized = self._ready.is_set()
            replaced = self._strategies
            self._apply(strategies, level)
            self._ready.set()
            current = self._strategies
        for strategy in replaced:
            if not any(strategy is s for s in current):
                self._safely(strategy, "close", strategy.close)
        self._log_banner(reconfigured=was_initialized)
        return self

    def configure(self, config: Any) -> "StrategicLogger":
        """Initialize from a LoggerConfig or an equivalent dict (parsed YAML)."""
        from strategic_logger.config import LoggerConfig

        if not isinstance(config, LoggerConfig):
            config = LoggerConfig.from_dict(config)
        return self.initialize(config.build_strategies(), config.level)

    def configure_defaults(self) -> "StrategicLogger":
        """Console at INFO. A sensible setup for development."""
        return self.initialize([ConsoleLogStrategy(log_level=LogLevel.INFO)], LogLevel.INFO)

    @property
    def is_initialized(self) -> bool:
        return self._ready.is_set()

    def _apply(self, strategies: Iterable[LogStrategy] | None, level: LogLevel | int | str) -> None:
        level = LogLevel.from_value(level)
        self._strategies = tuple(strategies or ())
        self._level = level

    def _require_initialized(self) -> None:
        if not self._ready.is_set():
            raise NotInitializedError()

    def _log_banner(self, reconfigured: bool) -> None:
        lines = ["STRATEGIC LOGGER CONFIG"]
        if reconfigured:
            lines.append("  !! RECONFIGURED WHILE IN USE !!")
        lines.append("  Strategies:")
        lines.extend(f"    - {s!r}" for s in self._strategies)
        lines.append(f"  Level: {self._level.name}")
        banner = "\n".join(lines)
        if reconfigured:
            logger.warning(banner)
        else:
            logger.info(banner)
        if self._level == LogLevel.NONE:
            logger.warning("Global level is NONE: no strategy will receive any call")

    # ── Level & strategy management ───────────────────────────────

    @property
    def level(self) -> LogLevel:
        return self._level

    @level.setter
    def level(self, value: LogLevel | int | str) -> None:
        self._level = LogLevel.from_value(value)

    @property
    def strategies(self) -> tuple[LogStrategy, ...]:
        return self._strategies

    def add_strategy(self, strategy: LogStrategy) -> None:
        """Append a strategy. It is invoked after the existing ones."""
        with self._config_lock:
            self._strategies = (*self._strategies, strategy)

    def remove_strategy(self, name: str) -> LogStrategy | None:
        """Remove a strategy by name. Returns it (already closed) or None."""
        with self._config_lock:
            strategy = self.get_strategy(name)
            if strategy is None:
                return None
            self._strategies = tuple(s for s in self._strategies if s is not strategy)
        self._safely(strategy, "close", strategy.close)
        return strategy

    def get_strategy(self, name: str) -> LogStrategy | None:
        for strategy in self._strategies:
            if strategy.name == name:
                return strategy
        return None

    def set_strategy_level(self, name: str, level: LogLevel | int | str) -> None:
        """Change one strategy's threshold at runtime."""
        strategy = self.get_strategy(name)
        if strategy is None:
            raise ValueError(f"Unknown strategy '{name}'")
        strategy.log_level = LogLevel.from_value(level)

    def is_enabled_for(self, level: LogLevel | int | str) -> bool:
        """Whether a call at this level passes the global threshold."""
        level = LogLevel.from_value(level)
        if level == LogLevel.NONE or self._level == LogLevel.NONE:
            return False
        return level >= self._level

    # ── Dispatch ──────────────────────────────────────────────────

    def emit(
        self,
        level: LogLevel | int | str,
        message: Any = None,
        event: LogEvent | None = None,
        error: Any = None,
        stack_trace: StackTrace = None,
    ) -> Awaitable[None]:
        """
        Fan one call out to every eligible strategy.

        Initialization is checked here, when the call is made, not when
        the returned awaitable runs.
        """
        self._require_initialized()
        return self._dispatch(LogLevel.from_value(level), message, event, error, stack_trace)

    def log(self, message: Any, event: LogEvent | None = None) -> Awaitable[None]:
        return self.emit(LogLevel.INFO, message, event=event)

    def error(
        self,
        error: Any,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
    ) -> Awaitable[None]:
        return self.emit(LogLevel.ERROR, event=event, error=error, stack_trace=stack_trace)

    def fatal(
        self,
        error: Any,
        stack_trace: StackTrace = None,
        event: LogEvent | None = None,
    ) -> Awaitable[None]:
        return self.emit(LogLevel.FATAL, event=event, error=error, stack_trace=stack_trace)

    def submit(
        self,
        level: LogLevel | int | str,
        message: Any = None,
        event: LogEvent | None = None,
        error: Any = None,
        stack_trace: StackTrace = None,
    ):
        """
        emit() for synchronous call sites: schedule and return at once.

        Returns the task or future running the dispatch. Raises only
        NotInitializedError.
        """
        coro = self.emit(level, message, event, error, stack_trace)
        return self._runner.submit(coro, self._report_unexpected)

    async def _dispatch(
        self,
        level: LogLevel,
        message: Any,
        event: LogEvent | None,
        error: Any,
        stack_trace: StackTrace,
    ) -> None:
        if not self.is_enabled_for(level):
            return

        strategies = self._strategies
        calls = [
            self._invoke(strategy, level, message, event, error, stack_trace)
            for strategy in strategies
            if self._accepts(strategy, event, level)
        ]
        if calls:
            # gather starts the tasks in list order
            await asyncio.gather(*calls)

    def _accepts(self, strategy: LogStrategy, event: LogEvent | None, level: LogLevel) -> bool:
        try:
            return bool(strategy.should_log(event=event, level=level))
        except Exception as exc:
            self._report_failure(StrategyFailure(strategy, "should_log", exc))
            return False

    async def _invoke(
        self,
        strategy: LogStrategy,
        level: LogLevel,
        message: Any,
        event: LogEvent | None,
        error: Any,
        stack_trace: StackTrace,
    ) -> None:
        operation = _operation_for(level)
        try:
            if operation == "log":
                result = strategy.log(message=message, event=event, level=level)
            else:
                # Without an explicit error the message is the payload
                if error is None:
                    error, message = message, None
                sink = strategy.fatal if operation == "fatal" else strategy.error
                result = sink(error=error, stack_trace=stack_trace, event=event, message=message)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            self._report_failure(StrategyFailure(strategy, operation, exc))

    # ── Failure reporting ─────────────────────────────────────────

    @property
    def recent_failures(self) -> list[StrategyFailure]:
        return list(self._failures)

    def _report_failure(self, failure: StrategyFailure) -> None:
        self._failures.append(failure)
        cause = failure.cause
        logger.warning("%s", failure, exc_info=(type(cause), cause, cause.__traceback__))
        if self.on_failure is not None:
            try:
                self.on_failure(failure)
            except Exception:
                logger.exception("on_failure hook raised while handling: %s", failure)

    def _report_unexpected(self, exc: BaseException) -> None:
        logger.error("Scheduled log dispatch failed", exc_info=(type(exc), exc, exc.__traceback__))

    def _safely(self, strategy: LogStrategy, operation: str, func: Callable[[], Any]) -> None:
        try:
            func()
        except Exception as exc:
            self._report_failure(StrategyFailure(strategy, operation, exc))

    # ── Status ────────────────────────────────────────────────────

    def status(self) -> dict:
        """Current logger state for display."""
        return {
            "initialized": self.is_initialized,
            "level": int(self._level),
            "level_name": level_name(self._level),
            "strategies": {
                strategy.name: {
                    "type": type(strategy).__name__,
                    "log_level": int(strategy.log_level),
                    "log_level_name": level_name(strategy.log_level),
                    "supported_events": sorted(strategy.supported_events),
                }
                for strategy in self._strategies
            },
            "pending": self._runner.pending,
            "recent_failures": len(self._failures),
        }

    # ── Cleanup ───────────────────────────────────────────────────

    def flush(self, timeout: float | None = None) -> bool:
        """
        Wait for dispatches scheduled from synchronous code, then flush all
        strategies. Returns False if the wait timed out.
        """
        done = self._runner.wait(timeout)
        for strategy in self._strategies:
            self._safely(strategy, "flush", strategy.flush)
        return done

    async def drain(self) -> None:
        """Await every scheduled dispatch, including tasks on the running loop."""
        await self._runner.drain()

    def close(self, timeout: float | None = 5.0) -> None:
        """Finish scheduled work and close all strategies. Call during shutdown."""
        self._runner.shutdown(timeout)
        for strategy in self._strategies:
            self._safely(strategy, "close", strategy.close)


def get_logger() -> StrategicLogger:
    """The default StrategicLogger instance."""
    return StrategicLogger.instance()


def _operation_for(level: LogLevel) -> str:
    """Severity picks the sink method, not just whether it fires."""
    if level >= LogLevel.FATAL:
        return "fatal"
    if level >= LogLevel.ERROR:
        return "error"
    return "log"
