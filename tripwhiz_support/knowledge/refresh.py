"""
Knowledge refresh: rebuild page documents from the content source while
keeping stored conversation documents.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Literal

from tqdm import tqdm

from tripwhiz_support.config import settings
from tripwhiz_support.content.source import ContentSource
from tripwhiz_support.embeddings.client import EmbeddingsClient
from tripwhiz_support.models.schemas import SitePage
from tripwhiz_support.vector_store.base import Document, DocumentType, VectorStore
from tripwhiz_support.vector_store.persistence import KeyValueSlot

logger = logging.getLogger(__name__)

DEFAULT_STALENESS = timedelta(hours=settings.knowledge_staleness_hours)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def page_embedding_text(page: SitePage) -> str:
    return f"{page.title}: {page.content}"


@dataclass
class RefreshSummary:
    status: Literal["completed", "failed", "skipped", "cancelled"]
    indexed_pages: int = 0
    failed_pages: int = 0
    preserved_conversations: int = 0
    elapsed_sec: float = 0.0


class KnowledgeRefreshService:
    """
    Keeps the store's page documents in sync with the content source.

    The service is not ready until a refresh attempt has finished (or was
    found unnecessary). A refresh attempt always ends in the ready state,
    even when the content source is unreachable, so chat keeps working
    without retrieved context.
    """

    def __init__(
        self,
        vector_store: VectorStore,
        embeddings_client: EmbeddingsClient,
        content_source: ContentSource,
        state_slot: KeyValueSlot | None = None,
        request_delay_sec: float = settings.refresh_request_delay_sec,
        staleness: timedelta = DEFAULT_STALENESS,
        clock: Callable[[], datetime] = _utcnow,
        sleep: Callable[[float], None] = time.sleep,
        show_progress: bool = False,
        logger_: logging.Logger | None = None,
    ) -> None:
        self.vector_store = vector_store
        self.embeddings_client = embeddings_client
        self.content_source = content_source
        self.state_slot = state_slot
        self.request_delay_sec = request_delay_sec
        self.staleness = staleness
        self.clock = clock
        self.sleep = sleep
        self.show_progress = show_progress
        self.logger = logger_ or logging.getLogger(__name__)

        self._ready = False
        self._in_flight = threading.Lock()
        self._cancelled = threading.Event()
        self.last_refresh_at: datetime | None = self._load_last_refresh()

    # --- State ---
    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight.locked()

    def cancel(self) -> None:
        """Stop a running refresh between pages; later refreshes are refused."""
        self._cancelled.set()

    def should_refresh(self, last_refresh_time: datetime | None = None, now: datetime | None = None) -> bool:
        """True if the store is empty or the last refresh is older than the staleness window."""
        if self.vector_store.count() == 0:
            return True
        last = last_refresh_time if last_refresh_time is not None else self.last_refresh_at
        if last is None:
            return True
        now = now or self.clock()
        return now - last > self.staleness

    def ensure_fresh(self) -> RefreshSummary | None:
        """Session start: refresh when stale, otherwise just mark the knowledge base ready."""
        try:
            if not self.should_refresh():
                self._ready = True
                self.logger.info(
                    "Knowledge base is fresh, skipping refresh",
                    extra={"last_refresh_at": self.last_refresh_at.isoformat() if self.last_refresh_at else None},
                )
                return None
            return self.refresh()
        except Exception:
            self.logger.exception("Failed to initialise knowledge base, continuing without it")
            self._ready = True
            return None

    # --- Refresh ---
    def refresh(self) -> RefreshSummary:
        if self._cancelled.is_set():
            return RefreshSummary(status="cancelled")
        if not self._in_flight.acquire(blocking=False):
            self.logger.info("Refresh already in progress, skipping")
            return RefreshSummary(status="skipped")

        started = time.time()
        self._ready = False
        try:
            return self._refresh(started)
        finally:
            self._ready = True
            self._in_flight.release()

    def _refresh(self, started: float) -> RefreshSummary:
        try:
            pages = self.content_source.fetch_pages()
        except Exception:
            self.logger.exception("Failed to fetch site content, keeping existing knowledge base")
            return RefreshSummary(status="failed", elapsed_sec=time.time() - started)

        preserved = self.vector_store.retain(lambda doc: doc.type is DocumentType.CONVERSATION)

        indexed = 0
        failed = 0
        iterator = tqdm(pages, desc="Refreshing", unit="pages", disable=not self.show_progress)
        for i, page in enumerate(iterator):
            if self._cancelled.is_set():
                self.logger.warning("Refresh cancelled", extra={"indexed_pages": indexed, "pages": len(pages)})
                return RefreshSummary(
                    status="cancelled",
                    indexed_pages=indexed,
                    failed_pages=failed,
                    preserved_conversations=preserved,
                    elapsed_sec=time.time() - started,
                )
            if self._index_page(page):
                indexed += 1
            else:
                failed += 1

            # rate limit: no pause after the last page
            if self.request_delay_sec > 0 and i < len(pages) - 1:
                self.sleep(self.request_delay_sec)

        self.last_refresh_at = self.clock()
        self._save_last_refresh()

        elapsed = time.time() - started
        self.logger.info(
            "Knowledge refresh completed",
            extra={
                "pages": len(pages),
                "indexed_pages": indexed,
                "failed_pages": failed,
                "preserved_conversations": preserved,
                "elapsed_sec": round(elapsed, 2),
            },
        )
        return RefreshSummary(
            status="completed",
            indexed_pages=indexed,
            failed_pages=failed,
            preserved_conversations=preserved,
            elapsed_sec=elapsed,
        )

    def _index_page(self, page: SitePage) -> bool:
        try:
            embedding = self.embeddings_client.embed_text(page_embedding_text(page))
        except Exception:
            self.logger.exception("Failed to embed page", extra={"url": page.url})
            return False
        if not embedding:
            self.logger.warning("Empty embedding for page", extra={"url": page.url})
            return False

        self.vector_store.upsert(
            Document(
                id=page.url,
                embedding=embedding,
                metadata={
                    "url": page.url,
                    "title": page.title,
                    "content": page.content,
                    "type": DocumentType.PAGE.value,
                },
            )
        )
        return True

    # --- Persisted refresh time ---
    def _load_last_refresh(self) -> datetime | None:
        if self.state_slot is None:
            return None
        try:
            raw = self.state_slot.read()
            if not raw:
                return None
            value = json.loads(raw).get("last_refresh_at")
            return datetime.fromisoformat(value) if value else None
        except (OSError, ValueError, TypeError, AttributeError):
            self.logger.warning("Ignoring unreadable knowledge state", extra={"slot": repr(self.state_slot)})
            return None

    def _save_last_refresh(self) -> None:
        if self.state_slot is None or self.last_refresh_at is None:
            return
        try:
            self.state_slot.write(json.dumps({"last_refresh_at": self.last_refresh_at.isoformat()}))
        except OSError:
            self.logger.exception("Failed to persist knowledge state", extra={"slot": repr(self.state_slot)})


__all__ = ["KnowledgeRefreshService", "RefreshSummary", "page_embedding_text", "DEFAULT_STALENESS"]
