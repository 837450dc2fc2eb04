"""
Composition root for the news cache.

Builds the stores from settings, wraps the live news service and wires
memory pressure notifications to the memory tier.
"""

import asyncio
import signal
from datetime import timedelta
from typing import Optional

from shared.config import NewsCacheSettings, get_settings
from shared.errors import ConfigurationError
from shared.logging import configure_logging, get_logger
from shared.metrics import MetricsCollector, get_metrics_collector

from .adapters.news_service import NetworkMonitor, NewsService
from .caching.caching_service import CachingNewsService
from .caching.disk_store import DiskNewsCacheStore
from .caching.memory_store import MemoryNewsCacheStore


SERVICE_NAME = "news"

logger = get_logger("news.bootstrap")


class MemoryPressureRelay:
    """Flushes a memory store when the host reports memory pressure."""

    def __init__(self, store: MemoryNewsCacheStore):
        self.store = store
        self.logger = get_logger("news.cache.memory_pressure")

    def handle(self) -> None:
        """Best-effort flush; never raises."""
        try:
            self.store.remove_all()
        except Exception as exc:
            self.logger.warning("Memory pressure flush failed", error=str(exc))
            return
        self.logger.info("News cache cleared due to memory pressure")

    def install(self, loop: asyncio.AbstractEventLoop, signum: int = signal.SIGUSR1) -> None:
        """Subscribe ``handle`` to ``signum`` on ``loop``."""
        loop.add_signal_handler(signum, self.handle)
        self.logger.debug("Memory pressure handler installed", signal=signum)

    def uninstall(self, loop: asyncio.AbstractEventLoop, signum: int = signal.SIGUSR1) -> None:
        loop.remove_signal_handler(signum)


def configure_news_logging(settings: Optional[NewsCacheSettings] = None) -> None:
    """Configure process-wide logging at the level from ``settings``.

    Call once at host startup, before building the service.
    """
    settings = settings or get_settings()
    configure_logging(SERVICE_NAME, settings.log_level)


def build_caching_news_service(
    wrapped: NewsService,
    settings: Optional[NewsCacheSettings] = None,
    *,
    network_monitor: Optional[NetworkMonitor] = None,
    metrics: Optional[MetricsCollector] = None,
) -> CachingNewsService:
    """Create a ``CachingNewsService`` with stores configured from ``settings``."""
    if not isinstance(wrapped, NewsService):
        raise ConfigurationError(
            "Wrapped service must implement NewsService",
            details={"type": type(wrapped).__name__}
        )

    settings = settings or get_settings()

    memory_store = MemoryNewsCacheStore(
        count_limit=settings.memory_count_limit,
        total_cost_limit=settings.memory_cost_limit_bytes
    )
    disk_store = DiskNewsCacheStore(settings.resolved_cache_dir()) if settings.disk_cache_enabled else None

    if metrics is None and settings.enable_metrics:
        metrics = get_metrics_collector(SERVICE_NAME)

    logger.info(
        "News cache configured",
        env=settings.env,
        memory_count_limit=settings.memory_count_limit,
        disk_cache_dir=str(disk_store.directory) if disk_store else None,
        metrics_enabled=metrics is not None
    )

    return CachingNewsService(
        wrapped,
        memory_store,
        disk_store,
        network_monitor=network_monitor,
        disk_ttl=timedelta(seconds=settings.disk_ttl_seconds),
        metrics=metrics
    )
