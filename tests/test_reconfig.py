"""
Tests for runtime reconfiguration of a live logger.
"""

import pytest

from strategic_logger.core import StrategicLogger
from strategic_logger.records import LogEvent, LogLevel
from strategic_logger.reconfig import LoggerReconfig
from strategic_logger.strategies import MemoryLogStrategy

from recording import RecordingStrategy


@pytest.fixture
def memory(logger):
    strategy = MemoryLogStrategy(name="recent", capacity=10)
    logger.initialize([RecordingStrategy(name="rec"), strategy], LogLevel.INFO)
    return strategy


@pytest.fixture
def reconfig(logger, memory):
    return LoggerReconfig(logger)


class TestLevels:
    def test_set_and_get_level(self, reconfig, logger):
        reconfig.set_level("DEBUG")
        assert reconfig.get_level() == 10
        assert logger.level is LogLevel.DEBUG

    def test_set_invalid_level(self, reconfig):
        with pytest.raises(ValueError):
            reconfig.set_level("loud")

    def test_set_strategy_level(self, reconfig, logger):
        reconfig.set_strategy_level("rec", "error")
        assert logger.get_strategy("rec").log_level is LogLevel.ERROR

    def test_set_unknown_strategy_level(self, reconfig):
        with pytest.raises(ValueError, match="Unknown strategy"):
            reconfig.set_strategy_level("ghost", "error")

    @pytest.mark.asyncio
    async def test_level_change_takes_effect(self, reconfig, logger, memory):
        await logger.emit(LogLevel.DEBUG, "dropped")
        reconfig.set_level("debug")
        await logger.emit(LogLevel.DEBUG, "kept")
        assert [e.message for e in memory.get_recent()] == ["kept"]


class TestStatus:
    @pytest.mark.asyncio
    async def test_status(self, reconfig, logger):
        await logger.log("one")
        status = reconfig.status()
        assert status["initialized"] is True
        assert status["global_level"] == 20
        assert status["global_level_name"] == "INFO"
        assert status["recent_failures"] == 0
        rec, recent = status["strategies"]
        assert rec == {"name": "rec", "type": "RecordingStrategy", "level": 10}
        assert recent["buffer_count"] == 1
        assert recent["buffer_max"] == 10

    def test_status_uninitialized_default(self):
        status = LoggerReconfig().status()
        assert status["initialized"] is False
        assert status["global_level_name"] == "NONE"
        assert status["strategies"] == []


class TestRecent:
    @pytest.mark.asyncio
    async def test_get_recent(self, reconfig, logger):
        await logger.log("plain")
        await logger.log("signed in", event=LogEvent("login", parameters={"user": "42"}))
        await logger.error(ValueError("boom"), event=LogEvent("login"))

        recent = reconfig.get_recent(n=10)
        assert [r["message"] for r in recent] == ["plain", "signed in", "ValueError: boom"]
        assert recent[0]["event"] is None
        assert recent[1]["event"] == {"event_name": "login", "parameters": {"user": "42"}}
        assert recent[2]["level"] == "ERROR"

        assert len(reconfig.get_recent(event_name="login")) == 2
        assert len(reconfig.get_recent(n=1)) == 1
        assert reconfig.get_recent(n=0) == []

    @pytest.mark.asyncio
    async def test_clear_recent(self, reconfig, logger, memory):
        await logger.log("x")
        reconfig.clear_recent()
        assert memory.count == 0

    def test_without_memory_strategy(self, logger):
        logger.initialize([RecordingStrategy()], LogLevel.INFO)
        reconfig = LoggerReconfig(logger)
        assert reconfig.get_recent() == []
        reconfig.clear_recent()

    def test_defaults_to_default_instance(self):
        StrategicLogger.instance().initialize([], LogLevel.WARNING)
        assert LoggerReconfig().get_level() == 30
