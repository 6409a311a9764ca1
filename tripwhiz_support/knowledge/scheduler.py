"""
Background timer that keeps the knowledge base fresh.
"""

from __future__ import annotations

import logging
import threading

from tripwhiz_support.config import settings
from tripwhiz_support.knowledge.refresh import KnowledgeRefreshService

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SEC = settings.refresh_interval_hours * 3600


class RefreshScheduler:
    """
    Runs `ensure_fresh()` once on start, then `refresh()` every interval.

    Overlap with a manual refresh is handled by the service's in-flight guard.
    """

    def __init__(self, service: KnowledgeRefreshService, interval_sec: float = DEFAULT_INTERVAL_SEC) -> None:
        self.service = service
        self.interval_sec = interval_sec
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="knowledge-refresh", daemon=True)
        self._thread.start()
        logger.info("Refresh scheduler started", extra={"interval_sec": self.interval_sec})

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Refresh scheduler stopped")

    def _run(self) -> None:
        self._tick(self.service.ensure_fresh)
        while not self._stop.wait(self.interval_sec):
            self._tick(self.service.refresh)

    def _tick(self, job) -> None:
        try:
            job()
        except Exception:
            logger.exception("Scheduled knowledge refresh failed")


__all__ = ["RefreshScheduler", "DEFAULT_INTERVAL_SEC"]
