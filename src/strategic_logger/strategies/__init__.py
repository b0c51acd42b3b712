from strategic_logger.strategies.base import LogStrategy
from strategic_logger.strategies.console import ConsoleLogEvent, ConsoleLogStrategy
from strategic_logger.strategies.memory import MemoryLogStrategy

__all__ = [
    "LogStrategy",
    "ConsoleLogStrategy",
    "ConsoleLogEvent",
    "MemoryLogStrategy",
]
