"""
Tests for the compatibility layer.

Covers:
- Level-named awaitable methods and aliases
- log_with_level / log_with_context and the structured helpers
- *_sync methods from plain code and from inside an event loop
- StrategicLogHandler (stdlib logging bridge)
"""

import logging

import pytest

from strategic_logger.compat import LoggerCompatibility, StrategicLogHandler
from strategic_logger.core import StrategicLogger
from strategic_logger.errors import NotInitializedError
from strategic_logger.records import LogEvent, LogLevel
from strategic_logger.strategies import MemoryLogStrategy

from recording import ExplodingStrategy, RecordingStrategy


@pytest.fixture
def recorder(logger):
    strategy = RecordingStrategy(name="rec")
    logger.initialize([strategy], LogLevel.DEBUG)
    return strategy


@pytest.fixture
def compat(logger):
    return LoggerCompatibility(logger)


# ═══════════════════════════════════════════════════════════════════
#  Awaitable API
# ═══════════════════════════════════════════════════════════════════

class TestLevelMethods:
    @pytest.mark.asyncio
    async def test_level_methods_route_by_severity(self, compat, recorder):
        await compat.debug("d")
        await compat.info("i")
        await compat.warning("w")
        await compat.error("e")
        await compat.fatal("f")
        assert recorder.operations == ["log", "log", "log", "error", "fatal"]
        assert [kw["level"] for _, kw in recorder.calls[:3]] == [
            LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARNING,
        ]

    @pytest.mark.asyncio
    async def test_aliases(self, compat, recorder):
        await compat.verbose("v")
        await compat.log("l")
        assert [kw["level"] for _, kw in recorder.calls] == [LogLevel.DEBUG, LogLevel.INFO]

    @pytest.mark.asyncio
    async def test_error_with_exception_keeps_message(self, compat, recorder):
        exc = ValueError("bad")
        await compat.error("payment failed", exc, "trace")
        _, kwargs = recorder.calls[0]
        assert kwargs["error"] is exc
        assert kwargs["message"] == "payment failed"
        assert kwargs["stack_trace"] == "trace"

    @pytest.mark.asyncio
    async def test_log_with_level(self, compat, recorder):
        await compat.log_with_level("warning", "disk")
        assert recorder.calls[0][1]["level"] is LogLevel.WARNING

    @pytest.mark.asyncio
    async def test_log_with_level_none_is_noop(self, compat, recorder):
        await compat.log_with_level(LogLevel.NONE, "nothing")
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_global_threshold_applies(self, logger):
        strategy = RecordingStrategy()
        logger.initialize([strategy], LogLevel.WARNING)
        compat = LoggerCompatibility(logger)
        await compat.info("dropped")
        await compat.warning("kept")
        assert [kw["message"] for _, kw in strategy.calls] == ["kept"]

    def test_uninitialized_raises(self, compat):
        with pytest.raises(NotInitializedError):
            compat.info("too early")

    @pytest.mark.asyncio
    async def test_default_logger(self):
        memory = MemoryLogStrategy()
        StrategicLogger.instance().initialize([memory], LogLevel.DEBUG)
        await LoggerCompatibility().info("via default")
        assert memory.get_recent()[0].message == "via default"


# ═══════════════════════════════════════════════════════════════════
#  Context and structured helpers
# ═══════════════════════════════════════════════════════════════════

class TestContext:
    @pytest.mark.asyncio
    async def test_tag_names_the_event(self, compat, recorder):
        await compat.log_with_context(LogLevel.INFO, "signed in", context={"user_id": "42"}, tag="LOGIN")
        event = recorder.calls[0][1]["event"]
        assert event.event_name == "LOGIN"
        assert event.event_message == "signed in"
        assert event.parameters == {"user_id": "42"}

    @pytest.mark.asyncio
    async def test_level_name_is_default_tag(self, compat, recorder):
        await compat.log_with_context(LogLevel.WARNING, "careful")
        assert recorder.calls[0][1]["event"].event_name == "WARNING"

    @pytest.mark.asyncio
    async def test_explicit_event_wins(self, compat, recorder):
        event = LogEvent("custom", "mine")
        await compat.log_with_context(LogLevel.INFO, "msg", context={"a": 1}, event=event, tag="IGNORED")
        assert recorder.calls[0][1]["event"] is event

    @pytest.mark.asyncio
    async def test_context_event_reaches_restricted_strategy(self, logger):
        restricted = RecordingStrategy(supported_events={"ERROR"})
        logger.initialize([restricted], LogLevel.DEBUG)
        compat = LoggerCompatibility(logger)
        await compat.error("plain error")
        await compat.log_error(ValueError("structured"))
        assert len(restricted.calls) == 1
        assert restricted.calls[0][1]["event"].event_name == "ERROR"

    @pytest.mark.asyncio
    async def test_structured_helper_tags(self, compat, recorder):
        await compat.log_structured(LogLevel.INFO, "s", data={"k": "v"})
        await compat.log_info("i")
        await compat.log_debug("d")
        await compat.log_warning("w", tag="DISK")
        await compat.log_fatal(RuntimeError("down"))
        names = [kw["event"].event_name for _, kw in recorder.calls]
        assert names == ["LOG", "INFO", "DEBUG", "DISK", "FATAL"]

    @pytest.mark.asyncio
    async def test_log_error_message_defaults_to_error_text(self, compat, recorder):
        exc = KeyError("missing")
        await compat.log_error(exc, context={"key": "missing"})
        _, kwargs = recorder.calls[0]
        assert kwargs["error"] is exc
        assert kwargs["message"] == str(exc)
        assert kwargs["event"].parameters == {"key": "missing"}


# ═══════════════════════════════════════════════════════════════════
#  Synchronous API
# ═══════════════════════════════════════════════════════════════════

class TestSyncMethods:
    def test_sync_methods_from_plain_code(self, logger):
        memory = MemoryLogStrategy()
        logger.initialize([memory], LogLevel.DEBUG)
        compat = LoggerCompatibility(logger)

        compat.debug_sync("d")
        compat.info_sync("i")
        compat.warning_sync("w")
        compat.error_sync("e")
        compat.fatal_sync("f")
        compat.verbose_sync("v")
        compat.log_sync("l")
        assert logger.flush(timeout=5)

        levels = sorted(int(e.level) for e in memory.get_recent())
        assert levels == [10, 10, 20, 20, 30, 40, 50]

    def test_sync_with_context(self, logger):
        memory = MemoryLogStrategy()
        logger.initialize([memory], LogLevel.DEBUG)
        LoggerCompatibility(logger).log_with_context_sync(
            LogLevel.INFO, "signed in", context={"user_id": "42"}, tag="LOGIN"
        )
        assert logger.flush(timeout=5)
        assert [e.text for e in memory.get_recent(event_name="LOGIN")] == ["signed in"]

    def test_sync_none_level_is_noop(self, logger):
        memory = MemoryLogStrategy()
        logger.initialize([memory], LogLevel.DEBUG)
        compat = LoggerCompatibility(logger)
        compat.log_with_level_sync(LogLevel.NONE, "nothing")
        compat.log_with_context_sync(LogLevel.NONE, "nothing")
        assert logger.status()["pending"] == 0
        assert memory.count == 0

    def test_sync_never_raises_on_strategy_failure(self, logger):
        logger.initialize([ExplodingStrategy()], LogLevel.DEBUG)
        compat = LoggerCompatibility(logger)
        compat.error_sync("boom")
        compat.info_sync("still fine")
        assert logger.flush(timeout=5)
        assert len(logger.recent_failures) == 2

    def test_sync_uninitialized_raises(self, compat):
        with pytest.raises(NotInitializedError):
            compat.info_sync("too early")

    @pytest.mark.asyncio
    async def test_sync_inside_event_loop(self, logger):
        memory = MemoryLogStrategy()
        logger.initialize([memory], LogLevel.DEBUG)
        LoggerCompatibility(logger).warning_sync("from a coroutine")
        await logger.drain()
        assert memory.get_recent()[0].message == "from a coroutine"


# ═══════════════════════════════════════════════════════════════════
#  Stdlib bridge
# ═══════════════════════════════════════════════════════════════════

class TestStrategicLogHandler:
    @pytest.fixture
    def app_logger(self, logger):
        memory = MemoryLogStrategy()
        logger.initialize([memory], LogLevel.DEBUG)
        handler = StrategicLogHandler(logger)
        app = logging.getLogger("tests.app")
        app.setLevel(logging.DEBUG)
        app.propagate = False
        app.addHandler(handler)
        yield app, memory
        app.removeHandler(handler)
        app.propagate = True

    def test_forwards_records(self, logger, app_logger):
        app, memory = app_logger
        app.info("hello %s", "world")
        app.warning("careful")
        assert logger.flush(timeout=5)
        entries = sorted(memory.get_recent(), key=lambda e: e.level)
        assert [(e.level, e.message) for e in entries] == [
            (LogLevel.INFO, "hello world"),
            (LogLevel.WARNING, "careful"),
        ]

    def test_exc_info_becomes_error(self, logger, app_logger):
        app, memory = app_logger
        try:
            raise ValueError("broken")
        except ValueError:
            app.exception("operation failed")
        assert logger.flush(timeout=5)
        entry = memory.get_recent()[0]
        assert entry.level == LogLevel.ERROR
        assert isinstance(entry.error, ValueError)
        assert "raise ValueError" in entry.formatted_stack_trace

    def test_critical_maps_to_fatal(self, logger, app_logger):
        app, memory = app_logger
        app.critical("down")
        assert logger.flush(timeout=5)
        assert memory.get_recent()[0].level == LogLevel.FATAL

    def test_log_event_extra(self, logger, app_logger):
        app, memory = app_logger
        app.info("paid", extra={"log_event": LogEvent("purchase", parameters={"amount": 5})})
        assert logger.flush(timeout=5)
        assert memory.get_recent(event_name="purchase")[0].message == "paid"

    def test_ignores_own_diagnostics(self, logger):
        memory = MemoryLogStrategy()
        logger.initialize([memory], LogLevel.DEBUG)
        handler = StrategicLogHandler(logger)
        record = logging.LogRecord("strategic_logger.core", logging.WARNING, __file__, 1, "x", None, None)
        handler.emit(record)
        assert logger.status()["pending"] == 0
        assert memory.count == 0

    def test_uninitialized_logger_goes_to_handle_error(self, logger, monkeypatch):
        handler = StrategicLogHandler(logger)
        seen = []
        monkeypatch.setattr(handler, "handleError", seen.append)
        record = logging.LogRecord("tests.app", logging.INFO, __file__, 1, "x", None, None)
        handler.emit(record)
        assert seen == [record]
