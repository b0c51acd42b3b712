"""
Pydantic configuration schemas for StrategicLogger.

Usage:
    config = LoggerConfig.from_yaml("logging.yaml")
    StrategicLogger.instance().configure(config)

Example YAML:
    level: info
    strategies:
      console: {type: console, level: debug, color: false, formatter: compact}
      recent:  {type: memory, level: warning, capacity: 500, supported_events: [ERROR]}

Third-party strategies become available to YAML through
register_strategy("sentry", SentryLogStrategy).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from strategic_logger.formatters import get_formatter
from strategic_logger.records import LogLevel
from strategic_logger.strategies.base import LogStrategy
from strategic_logger.strategies.console import ConsoleLogStrategy
from strategic_logger.strategies.memory import MemoryLogStrategy


# ═══════════════════════════════════════════════════════════════════
#  Strategy registry
# ═══════════════════════════════════════════════════════════════════

_STRATEGIES: dict[str, type[LogStrategy]] = {
    "console": ConsoleLogStrategy,
    "memory": MemoryLogStrategy,
}


def register_strategy(type_name: str, cls: type[LogStrategy]) -> None:
    """Register a custom strategy type. Call before configure()."""
    _STRATEGIES[type_name] = cls


def available_strategies() -> list[str]:
    return sorted(_STRATEGIES)


# ═══════════════════════════════════════════════════════════════════
#  Schemas
# ═══════════════════════════════════════════════════════════════════

class StrategyConfig(BaseModel):
    # Unknown keys are passed to custom strategy constructors
    model_config = ConfigDict(extra="allow")

    type: str
    level: int | str = "debug"
    supported_events: Optional[list[str]] = None
    color: Optional[bool] = None              # console
    formatter: Optional[str] = None           # console
    stream: Optional[str] = None              # console
    capacity: Optional[int] = None            # memory

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: int | str) -> int | str:
        LogLevel.from_value(v)
        return v


class LoggerConfig(BaseModel):
    level: int | str = "info"
    strategies: Optional[dict[str, StrategyConfig]] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: int | str) -> int | str:
        LogLevel.from_value(v)
        return v

    @property
    def log_level(self) -> LogLevel:
        return LogLevel.from_value(self.level)

    def build_strategies(self) -> list[LogStrategy]:
        """Instantiate strategies in the order they are declared."""
        return [build_strategy(name, cfg) for name, cfg in (self.strategies or {}).items()]

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LoggerConfig":
        """Load and validate from a YAML file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "LoggerConfig":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LoggerConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none)


# ═══════════════════════════════════════════════════════════════════
#  Builders
# ═══════════════════════════════════════════════════════════════════

def build_strategy(name: str, cfg: StrategyConfig | dict) -> LogStrategy:
    """Build a strategy from its config section."""
    if isinstance(cfg, dict):
        cfg = StrategyConfig.model_validate(cfg)

    cls = _STRATEGIES.get(cfg.type)
    if cls is None:
        raise ValueError(
            f"Unknown strategy type '{cfg.type}' for strategy '{name}'. "
            f"Available: {available_strategies()}. "
            f"Register custom strategies with register_strategy()."
        )

    kwargs: dict[str, Any] = {
        "log_level": LogLevel.from_value(cfg.level),
        "supported_events": cfg.supported_events,
        "name": name,
    }
    if issubclass(cls, ConsoleLogStrategy):
        if cfg.formatter is not None:
            kwargs["formatter"] = get_formatter(cfg.formatter)
        if cfg.color is not None:
            kwargs["color"] = cfg.color
        if cfg.stream is not None:
            kwargs["stream"] = cfg.stream
    elif issubclass(cls, MemoryLogStrategy):
        if cfg.capacity is not None:
            kwargs["capacity"] = cfg.capacity
    kwargs.update(cfg.model_extra or {})
    return cls(**kwargs)
