"""
Tests for settings, logging setup and the composition root.
"""

import asyncio
import logging
import os
import signal
from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

from shared.config import DEFAULT_CACHE_DIRNAME, NewsCacheSettings
from shared.errors import ConfigurationError, OfflineNoCacheError
from shared.logging import (
    add_service_context,
    build_processors,
    clear_context,
    configure_logging,
    get_logger,
    request_id_var,
    service_name_var,
    set_request_id,
)
from service_news.app.bootstrap import MemoryPressureRelay, build_caching_news_service, configure_news_logging
from service_news.app.caching.caching_service import CachingNewsService
from service_news.app.caching.entry import CacheEntry
from service_news.app.caching.keys import BreakingNewsKey
from service_news.app.caching.memory_store import MemoryNewsCacheStore


class TestNewsCacheSettings:
    """Test cases for NewsCacheSettings."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Defaults match the documented memory limits and disk TTL."""
        monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
        settings = NewsCacheSettings()

        assert settings.memory_count_limit == 100
        assert settings.memory_cost_limit_bytes == 50 * 1024 * 1024
        assert settings.disk_ttl_seconds == 24 * 60 * 60
        assert settings.disk_cache_enabled is True
        assert settings.resolved_cache_dir() == tmp_path / DEFAULT_CACHE_DIRNAME

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """PULSE_ prefixed variables override defaults."""
        monkeypatch.setenv("PULSE_MEMORY_COUNT_LIMIT", "10")
        monkeypatch.setenv("PULSE_CACHE_DIR", str(tmp_path / "custom"))
        monkeypatch.setenv("PULSE_DISK_CACHE_ENABLED", "false")

        settings = NewsCacheSettings()

        assert settings.memory_count_limit == 10
        assert settings.resolved_cache_dir() == Path(tmp_path / "custom")
        assert settings.disk_cache_enabled is False


class TestBuildCachingNewsService:
    """Test cases for build_caching_news_service."""

    def test_builds_two_tier_service(self, news_service, tmp_path):
        """Stores are created from settings."""
        settings = NewsCacheSettings(cache_dir=tmp_path / "cache", memory_count_limit=7, disk_ttl_seconds=60)

        service = build_caching_news_service(news_service, settings)

        assert isinstance(service, CachingNewsService)
        assert service.memory_store.count_limit == 7
        assert service.disk_store.directory == tmp_path / "cache"
        assert service.disk_ttl.total_seconds() == 60
        assert service.metrics is None

    def test_disk_tier_can_be_disabled(self, news_service, tmp_path):
        """Disabling the disk tier yields a memory-only service."""
        settings = NewsCacheSettings(cache_dir=tmp_path, disk_cache_enabled=False, enable_metrics=True)

        service = build_caching_news_service(news_service, settings)

        assert service.disk_store is None
        assert service.metrics is not None

    def test_rejects_non_news_service(self, tmp_path):
        """Wrapping something that is not a NewsService is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_caching_news_service(object(), NewsCacheSettings(cache_dir=tmp_path))

        assert exc_info.value.to_response().code == "CONFIGURATION_ERROR"

    @pytest.mark.asyncio
    async def test_offline_error_response(self, news_service, tmp_path):
        """Offline misses surface as a coded error."""
        class Offline:
            is_connected = False

        service = build_caching_news_service(
            news_service,
            NewsCacheSettings(cache_dir=tmp_path),
            network_monitor=Offline()
        )

        with pytest.raises(OfflineNoCacheError) as exc_info:
            await service.fetch_breaking_news("us")

        assert exc_info.value.to_response().details == {"key": "breaking_us", "operation": "breaking_news"}


class TestMemoryPressureRelay:
    """Test cases for MemoryPressureRelay."""

    @pytest.fixture
    def store(self, articles):
        store = MemoryNewsCacheStore()
        store.set(CacheEntry(data=articles), BreakingNewsKey(country="us"))
        return store

    def test_handle_flushes_store(self, store):
        """A pressure notification empties the memory tier and logs it."""
        with capture_logs() as logs:
            MemoryPressureRelay(store).handle()

        assert len(store) == 0
        assert any(log["event"] == "News cache cleared due to memory pressure" for log in logs)

    def test_handle_never_raises(self):
        """Flush failures are logged, not raised."""
        class BrokenStore:
            def remove_all(self):
                raise RuntimeError("boom")

        with capture_logs() as logs:
            MemoryPressureRelay(BrokenStore()).handle()

        assert logs[0]["log_level"] == "warning"

    @pytest.mark.asyncio
    async def test_signal_subscription(self, store):
        """The installed signal handler flushes the store."""
        loop = asyncio.get_running_loop()
        relay = MemoryPressureRelay(store)
        relay.install(loop, signal.SIGUSR1)
        try:
            os.kill(os.getpid(), signal.SIGUSR1)
            for _ in range(50):
                if len(store) == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            relay.uninstall(loop, signal.SIGUSR1)

        assert len(store) == 0


class TestLogging:
    """Test cases for structured logging helpers."""

    def teardown_method(self):
        clear_context()
        service_name_var.set(None)
        structlog.reset_defaults()

    def test_configure_logging(self):
        """configure_logging installs a stdlib-backed structlog pipeline."""
        configure_logging("news", "debug")

        assert structlog.is_configured()
        assert get_logger("news.test") is not None

    def test_request_id_context(self):
        """Request ids are generated when not supplied and cleared on demand."""
        request_id = set_request_id()

        assert request_id_var.get() == request_id
        clear_context()
        assert request_id_var.get() is None

    def test_configure_news_logging_uses_settings(self, tmp_path):
        """The composition root tags events with the news service name."""
        configure_news_logging(NewsCacheSettings(cache_dir=tmp_path, log_level="debug"))

        assert structlog.is_configured()
        assert service_name_var.get() == "news"

    def test_processors_keep_iso_timestamp(self):
        """Events carry an ISO timestamp, the logger name and correlation context."""
        service_name_var.set("news")
        set_request_id("req-1")
        event = {"event": "Memory cache hit"}

        for processor in build_processors():
            event = processor(logging.getLogger("news.cache.memory"), "warning", event)

        assert isinstance(event["timestamp"], str)
        assert event["timestamp"].startswith("20")
        assert "T" in event["timestamp"]
        assert event["logger"] == "news.cache.memory"
        assert event["level"] == "warning"
        assert event["service"] == "news"
        assert event["request_id"] == "req-1"

    def test_service_falls_back_to_logger_prefix(self):
        """Without a configured service name the logger prefix is used."""
        event = {"event": "x", "logger": "news.cache.disk"}

        assert add_service_context(None, "info", event)["service"] == "news"
