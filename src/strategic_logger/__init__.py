"""
Strategic Logger

A logging facade: one entry point, any number of output strategies, each
with its own threshold and event filter. Strategy failures are contained
and reported, never raised to the logging call site.
"""

from strategic_logger.records import LogLevel, LogEvent, LogEntry, level_name
from strategic_logger.errors import (
    StrategicLoggerError,
    NotInitializedError,
    AlreadyInitializedError,
    StrategyFailure,
)
from strategic_logger.strategies import (
    LogStrategy,
    ConsoleLogStrategy,
    ConsoleLogEvent,
    MemoryLogStrategy,
)
from strategic_logger.formatters import LogFormatter, CompactFormatter, DetailedFormatter, JsonFormatter
from strategic_logger.core import StrategicLogger, get_logger
from strategic_logger.compat import LoggerCompatibility, StrategicLogHandler
from strategic_logger.config import LoggerConfig, StrategyConfig, register_strategy
from strategic_logger.reconfig import LoggerReconfig

__all__ = [
    "StrategicLogger",
    "get_logger",
    "LogLevel",
    "LogEvent",
    "LogEntry",
    "level_name",
    "StrategicLoggerError",
    "NotInitializedError",
    "AlreadyInitializedError",
    "StrategyFailure",
    "LogStrategy",
    "ConsoleLogStrategy",
    "ConsoleLogEvent",
    "MemoryLogStrategy",
    "LogFormatter",
    "CompactFormatter",
    "DetailedFormatter",
    "JsonFormatter",
    "LoggerCompatibility",
    "StrategicLogHandler",
    "LoggerConfig",
    "StrategyConfig",
    "register_strategy",
    "LoggerReconfig",
]
