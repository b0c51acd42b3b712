"""
Runtime reconfiguration.

Provides runtime control over a live logger without re-initializing it:
- Change the global level or one strategy's level
- Get a status overview
- Read the in-memory ring buffer

Usage:
    reconfig = LoggerReconfig()
    reconfig.set_level("DEBUG")
    reconfig.set_strategy_level("console", "warning")
    recent = reconfig.get_recent(n=50, event_name="checkout_failed")
"""

from __future__ import annotations

from typing import Any

from strategic_logger.core import StrategicLogger
from strategic_logger.records import level_name
from strategic_logger.strategies.memory import MemoryLogStrategy


class LoggerReconfig:
    """Runtime reconfiguration interface for StrategicLogger."""

    def __init__(self, logger: StrategicLogger | None = None):
        self._log = logger or StrategicLogger.instance()

    # ── Level management ──────────────────────────────────────

    def set_level(self, level: str | int) -> None:
        """Set global log level."""
        self._log.level = level

    def get_level(self) -> int:
        return int(self._log.level)

    def set_strategy_level(self, name: str, level: str | int) -> None:
        """Set level for one strategy. Unknown name raises ValueError."""
        self._log.set_strategy_level(name, level)

    # ── Status ────────────────────────────────────────────────

    def status(self) -> dict[str, Any]:
        """
        Flat status overview.

        Returns:
            {
                "initialized": bool,
                "global_level": int,
                "global_level_name": str,
                "strategies": [{"name": ..., "type": ..., "level": ...}],
                "recent_failures": int,
            }
        """
        strategies = []
        for strategy in self._log.strategies:
            info = {
                "name": strategy.name,
                "type": type(strategy).__name__,
                "level": int(strategy.log_level),
            }
            if isinstance(strategy, MemoryLogStrategy):
                info["buffer_count"] = strategy.count
                info["buffer_max"] = strategy.capacity
            strategies.append(info)

        return {
            "initialized": self._log.is_initialized,
            "global_level": int(self._log.level),
            "global_level_name": level_name(self._log.level),
            "strategies": strategies,
            "recent_failures": len(self._log.recent_failures),
        }

    # ── Memory buffer access ──────────────────────────────────

    def _memory(self) -> MemoryLogStrategy | None:
        for strategy in self._log.strategies:
            if isinstance(strategy, MemoryLogStrategy):
                return strategy
        return None

    def get_recent(self, n: int = 100, event_name: str | None = None) -> list[dict[str, Any]]:
        """Recent entries from the first memory strategy, as plain dicts."""
        memory = self._memory()
        if memory is None:
            return []

        return [
            {
                "timestamp": e.timestamp.isoformat(),
                "level": e.level_name,
                "message": e.text,
                "event": e.event.to_map() if e.event else None,
            }
            for e in memory.get_recent(n, event_name)
        ]

    def clear_recent(self) -> None:
        memory = self._memory()
        if memory is not None:
            memory.clear()
