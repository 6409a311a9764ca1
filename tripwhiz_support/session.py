"""
Explicitly constructed service container for one hosting session.
"""

from __future__ import annotations

import logging

from tripwhiz_support.config import settings
from tripwhiz_support.content.source import ContentSource, get_content_source
from tripwhiz_support.embeddings.client import EmbeddingsClient
from tripwhiz_support.knowledge.refresh import KnowledgeRefreshService
from tripwhiz_support.knowledge.scheduler import RefreshScheduler
from tripwhiz_support.llm.client import LLMClient
from tripwhiz_support.rag.pipeline import SupportChatService
from tripwhiz_support.vector_store import get_slot, get_vector_store
from tripwhiz_support.vector_store.base import VectorStore

logger = logging.getLogger(__name__)


class SupportSession:
    """
    Owns the store and everything that reads or writes it.

    `init()` loads the store and, when a scheduler is attached, starts the
    background refresh. `dispose()` cancels any running refresh, stops the
    scheduler and flushes the store; a refresh still on its current page
    after that cannot write to the slot.
    """

    def __init__(
        self,
        vector_store: VectorStore,
        embeddings_client: EmbeddingsClient,
        llm_client: LLMClient,
        content_source: ContentSource,
        refresh_service: KnowledgeRefreshService,
        scheduler: RefreshScheduler | None = None,
    ) -> None:
        self.vector_store = vector_store
        self.embeddings_client = embeddings_client
        self.llm_client = llm_client
        self.content_source = content_source
        self.refresh_service = refresh_service
        self.scheduler = scheduler

    @classmethod
    def from_settings(cls) -> "SupportSession":
        vector_store = get_vector_store()
        embeddings_client = EmbeddingsClient()
        content_source = get_content_source()
        refresh_service = KnowledgeRefreshService(
            vector_store,
            embeddings_client,
            content_source,
            state_slot=get_slot(settings.knowledge_state_key),
        )
        scheduler = RefreshScheduler(refresh_service) if settings.scheduler_enabled else None
        return cls(
            vector_store=vector_store,
            embeddings_client=embeddings_client,
            llm_client=LLMClient(),
            content_source=content_source,
            refresh_service=refresh_service,
            scheduler=scheduler,
        )

    def chat_service(self, request_id: str | None = None) -> SupportChatService:
        return SupportChatService(
            vector_store=self.vector_store,
            embeddings_client=self.embeddings_client,
            llm_client=self.llm_client,
            knowledge=self.refresh_service,
            request_id=request_id,
        )

    def init(self) -> None:
        self.vector_store.init()
        if self.scheduler is not None:
            self.scheduler.start()
        logger.info("Support session initialised", extra={"documents": self.vector_store.count()})

    def dispose(self) -> None:
        self.refresh_service.cancel()
        if self.scheduler is not None:
            self.scheduler.stop()
        self.vector_store.dispose()
        logger.info("Support session disposed")


__all__ = ["SupportSession"]
