"""
Error types.

Two families that never mix: caller misuse (raised to the caller) and
strategy failures (contained by the dispatcher and only reported).
"""

from typing import Any


class StrategicLoggerError(Exception):
    """Base class for errors raised by the logger itself."""


class NotInitializedError(StrategicLoggerError):
    """A dispatch call was made before initialize()."""

    def __init__(self, message: str = "Attempted to use a logger that has not been initialized.") -> None:
        super().__init__(message)


class AlreadyInitializedError(StrategicLoggerError):
    """initialize() was called on a logger that is already initialized."""

    def __init__(self, message: str = "Attempted to initialize a logger that has already been initialized.") -> None:
        super().__init__(message)


class StrategyFailure(Exception):
    """
    A strategy raised while handling a call.

    Built by the dispatcher and handed to the diagnostic channel and the
    on_failure hook. Never raised to the code that made the log call.
    """

    def __init__(self, strategy: Any, operation: str, cause: BaseException) -> None:
        self.strategy = strategy
        self.operation = operation
        self.cause = cause
        name = getattr(strategy, "name", type(strategy).__name__)
        super().__init__(
            f"Strategy '{name}' failed during {operation}: "
            f"{type(cause).__name__}: {cause}"
        )
