"""
Module: test_dispatcher.py
Description: Unit tests for the EventLogger dispatcher.

Providers are replaced with in-memory fakes so the tests can control
timing and failures of each destination independently.
"""

import asyncio

import pytest

from event_notifier.config.settings import EventLoggerConfig, NotifierSettings
from event_notifier.delivery.dispatcher import EventLogger
from event_notifier.errors import ConfigurationError
from event_notifier.models.event import Severity
from event_notifier.providers import TelegramProvider


class FakeProvider:
    """Provider double recording sends and completion order."""

    def __init__(self, name, completed, result=True, delay=0.0, error=None):
        self.name = name
        self.calls = []
        self._completed = completed
        self._result = result
        self._delay = delay
        self._error = error

    async def send(self, message, severity, metadata=None):
        self.calls.append((message, severity, metadata))
        if self._delay:
            await asyncio.sleep(self._delay)
        self._completed.append(self.name)
        if self._error is not None:
            raise self._error
        return self._result


def config_with(count):
    """Build a configuration mapping with ``count`` telegram providers."""
    return {
        "environment": "server",
        "providers": [
            {"kind": "telegram", "bot_token": f"{index}:token", "chat_id": str(index)}
            for index in range(count)
        ]
    }


def factory_for(*providers):
    """Build a factory handing out the given fakes in configuration order."""
    queue = list(providers)

    def factory(config, diagnostics=None, **kwargs):
        return queue.pop(0)

    return {"telegram": factory}


class TestEventLoggerConstruction:
    """Test cases for EventLogger construction."""

    def test_builds_one_provider_per_config(self, diagnostics):
        """Test each configured destination becomes a TelegramProvider."""
        event_logger = EventLogger(config_with(2), diagnostics=diagnostics)

        assert len(event_logger.providers) == 2
        assert all(isinstance(provider, TelegramProvider) for provider in event_logger.providers)
        assert [provider.chat_id for provider in event_logger.providers] == ["0", "1"]
        assert isinstance(event_logger.config, EventLoggerConfig)

    def test_providers_share_diagnostics(self, diagnostics):
        """Test providers report to the dispatcher's diagnostics sink."""
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics)

        assert event_logger.providers[0].diagnostics is diagnostics

    def test_provider_options_forwarded(self, diagnostics, no_sleep, fixed_clock):
        """Test extra keyword arguments reach every provider."""
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics, sleep=no_sleep, clock=fixed_clock)

        assert event_logger.providers[0].retrier._sleep is no_sleep

    def test_unsupported_kind_skipped(self, diagnostics):
        """Test kinds without a registered factory are skipped silently."""
        event_logger = EventLogger(config_with(2), diagnostics=diagnostics, provider_factories={})

        assert event_logger.providers == ()
        diagnostics.debug.assert_any_call("Skipping unsupported provider kind", kind="telegram")

    def test_empty_providers_is_fatal(self, diagnostics):
        """Test a configuration without destinations cannot be built."""
        with pytest.raises(ConfigurationError):
            EventLogger({"environment": "server", "providers": []}, diagnostics=diagnostics)

    def test_unsupported_environment_is_fatal(self, diagnostics):
        """Test an unsupported environment cannot be built."""
        config = config_with(1)
        config["environment"] = "browser"

        with pytest.raises(ConfigurationError):
            EventLogger(config, diagnostics=diagnostics)

    def test_invalid_provider_is_fatal(self, diagnostics):
        """Test construction fails atomically when any provider is invalid."""
        config = config_with(2)
        config["providers"][1]["bot_token"] = ""

        with pytest.raises(ConfigurationError):
            EventLogger(config, diagnostics=diagnostics)

    def test_from_settings(self, diagnostics, monkeypatch):
        """Test settings build a single-provider logger."""
        monkeypatch.setenv("EVENT_NOTIFIER_TELEGRAM_BOT_TOKEN", "999:env-token")
        monkeypatch.setenv("EVENT_NOTIFIER_TELEGRAM_CHAT_ID", "-42")

        event_logger = EventLogger.from_settings(NotifierSettings(_env_file=None), diagnostics=diagnostics)

        assert len(event_logger.providers) == 1
        assert event_logger.providers[0].chat_id == "-42"


class TestEventLoggerDeliver:
    """Test cases for EventLogger.deliver() and the level shortcuts."""

    @pytest.mark.asyncio
    async def test_fans_out_to_every_provider(self, diagnostics):
        """Test one call reaches each of N providers exactly once."""
        completed = []
        fakes = [FakeProvider(f"p{index}", completed) for index in range(3)]
        event_logger = EventLogger(config_with(3), diagnostics=diagnostics, provider_factories=factory_for(*fakes))

        await event_logger.deliver("hello", Severity.INFO, {"k": "v"})

        for fake in fakes:
            assert fake.calls == [("hello", Severity.INFO, {"k": "v"})]
        diagnostics.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_others(self, diagnostics):
        """Test a failing provider never prevents the others from delivering."""
        completed = []
        fakes = [
            FakeProvider("ok-1", completed),
            FakeProvider("broken", completed, result=False),
            FakeProvider("ok-2", completed),
        ]
        event_logger = EventLogger(config_with(3), diagnostics=diagnostics, provider_factories=factory_for(*fakes))

        await event_logger.deliver("hello", Severity.ERROR)

        assert sorted(completed) == ["broken", "ok-1", "ok-2"]
        diagnostics.warning.assert_called_once()
        _, kwargs = diagnostics.warning.call_args
        assert kwargs["failed"] == ["broken"]
        assert kwargs["delivered"] == 2
        assert kwargs["severity"] == "error"

    @pytest.mark.asyncio
    async def test_waits_for_slowest_provider(self, diagnostics):
        """Test deliver returns only after every provider is terminal."""
        completed = []
        fakes = [
            FakeProvider("fast", completed),
            FakeProvider("slow", completed, result=False, delay=0.05),
        ]
        event_logger = EventLogger(config_with(2), diagnostics=diagnostics, provider_factories=factory_for(*fakes))

        await event_logger.deliver("hello", Severity.WARN)

        assert completed == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_deliveries_run_concurrently(self, diagnostics):
        """Test slow providers are awaited concurrently, not in sequence."""
        completed = []
        fakes = [FakeProvider(f"p{index}", completed, delay=0.2) for index in range(3)]
        event_logger = EventLogger(config_with(3), diagnostics=diagnostics, provider_factories=factory_for(*fakes))

        loop = asyncio.get_running_loop()
        started = loop.time()
        await event_logger.deliver("hello", Severity.LOG)
        elapsed = loop.time() - started

        assert len(completed) == 3
        assert elapsed < 0.5

    @pytest.mark.asyncio
    async def test_raising_provider_is_isolated(self, diagnostics):
        """Test a provider that raises is treated as failed without affecting others."""
        completed = []
        fakes = [
            FakeProvider("raises", completed, error=RuntimeError("boom")),
            FakeProvider("ok", completed, delay=0.01),
        ]
        event_logger = EventLogger(config_with(2), diagnostics=diagnostics, provider_factories=factory_for(*fakes))

        await event_logger.deliver("hello", Severity.ERROR)

        assert completed == ["raises", "ok"]
        diagnostics.error.assert_called_once()
        _, kwargs = diagnostics.warning.call_args
        assert kwargs["failed"] == ["raises"]

    @pytest.mark.asyncio
    async def test_empty_message_without_metadata_is_noop(self, diagnostics):
        """Test an empty message with no metadata performs zero deliveries."""
        completed = []
        fake = FakeProvider("p", completed)
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics, provider_factories=factory_for(fake))

        await event_logger.deliver("", Severity.INFO, {})
        await event_logger.deliver("", Severity.INFO)

        assert fake.calls == []
        assert diagnostics.warning.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_message_with_metadata_is_delivered(self, diagnostics):
        """Test an empty message carrying metadata is delivered."""
        completed = []
        fake = FakeProvider("p", completed)
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics, provider_factories=factory_for(fake))

        await event_logger.deliver("", Severity.INFO, {"event": "x"})

        assert fake.calls == [("", Severity.INFO, {"event": "x"})]

    @pytest.mark.asyncio
    async def test_non_string_message_is_noop(self, diagnostics):
        """Test non-text messages are rejected without raising."""
        completed = []
        fake = FakeProvider("p", completed)
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics, provider_factories=factory_for(fake))

        await event_logger.deliver(None, Severity.INFO, {"event": "x"})
        await event_logger.deliver(42, Severity.INFO)

        assert fake.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,severity", [
        ("log", Severity.LOG),
        ("info", Severity.INFO),
        ("warn", Severity.WARN),
        ("error", Severity.ERROR),
    ])
    async def test_level_shortcuts(self, diagnostics, method, severity):
        """Test each shortcut delivers with its own severity."""
        completed = []
        fake = FakeProvider("p", completed)
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics, provider_factories=factory_for(fake))

        await getattr(event_logger, method)("hello", {"n": 1})

        assert fake.calls == [("hello", severity, {"n": 1})]

    @pytest.mark.asyncio
    async def test_no_providers_is_noop(self, diagnostics):
        """Test a logger whose kinds were all skipped delivers nothing."""
        event_logger = EventLogger(config_with(1), diagnostics=diagnostics, provider_factories={})

        await event_logger.deliver("hello", Severity.INFO)

        diagnostics.warning.assert_not_called()
