"""
RAG pipeline: embed the message, retrieve context, ask the LLM, learn from the turn.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

from tripwhiz_support.config import settings
from tripwhiz_support.embeddings.client import EmbeddingsClient
from tripwhiz_support.knowledge.refresh import KnowledgeRefreshService
from tripwhiz_support.llm.client import LLMClient
from tripwhiz_support.vector_store.base import Document, DocumentType, SimilarityResult, VectorStore

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "I apologize, but I'm experiencing some technical difficulties. Please try again in a moment, "
    "or feel free to explore the TripWhiz features directly."
)
NO_CONTEXT = "No additional context provided"

SYSTEM_PROMPT = """You are TripWhiz Support, an AI assistant for the TripWhiz travel booking platform. You help users with:

AVAILABLE FEATURES:
- Budget Airline Tracker: Real-time flight price comparison using Amadeus API
- Price Drop Notifier: Automatic price monitoring with browser notifications
- Carry-On Only Filter: Find flights without checked baggage fees
- Travel VPN Trick: Search flights from different country markets for better pricing
- Hidden Deal Finder: Discover secret airline deals
- Error Fare Scanner: Find pricing mistakes for savings
- Multi-City Hack Builder: Optimize complex routes
- AI Chat Assistant: This support system

CONTEXT: {context}

Guidelines:
- Be helpful, friendly, and knowledgeable about TripWhiz features
- Provide specific guidance on how to use each travel tool
- Help troubleshoot issues with flight searches, price tracking, and notifications
- Keep responses concise but informative
- If you don't know something specific, acknowledge it and suggest contacting human support"""


@dataclass
class ChatAnswer:
    reply: str
    context: str = ""
    sources: List[SimilarityResult] = field(default_factory=list)
    fallback: bool = False

    @property
    def context_used(self) -> bool:
        return bool(self.context)


class SupportChatService:
    """Retrieval-augmented support chat with self-training on every answered turn."""

    def __init__(
        self,
        vector_store: VectorStore,
        embeddings_client: EmbeddingsClient,
        llm_client: LLMClient,
        knowledge: KnowledgeRefreshService,
        top_k: int = settings.retrieval_top_k,
        relevance_threshold: float = settings.relevance_threshold,
        token_factory: Callable[[], int] = time.time_ns,
        logger_: logging.Logger | None = None,
        request_id: str | None = None,
    ) -> None:
        self.vector_store = vector_store
        self.embeddings_client = embeddings_client
        self.llm_client = llm_client
        self.knowledge = knowledge
        self.top_k = top_k
        self.relevance_threshold = relevance_threshold
        self.token_factory = token_factory
        self.logger = logger_ or logging.getLogger(__name__)
        self.request_id = request_id

    # --- Public API ---
    def answer(self, user_text: str) -> str:
        return self.respond(user_text).reply

    def respond(self, user_text: str) -> ChatAnswer:
        """Main entry point: one chat turn."""
        message = self.normalize_message(user_text)
        if not message:
            raise ValueError("Message must not be empty")

        query_embedding = self._embed(message)

        sources: List[SimilarityResult] = []
        if query_embedding and self.knowledge.is_ready:
            sources = self.retrieve_relevant(query_embedding)
        context = self.build_context(sources)

        try:
            reply = self.llm_client.chat(self._build_messages(message, context))
        except Exception:
            self.logger.exception("Chat completion failed", extra={"request_id": self.request_id})
            return ChatAnswer(reply=FALLBACK_REPLY, context=context, sources=sources, fallback=True)
        if not reply.strip():
            self.logger.warning("Chat completion returned empty reply", extra={"request_id": self.request_id})
            return ChatAnswer(reply=FALLBACK_REPLY, context=context, sources=sources, fallback=True)

        self._learn_from_turn(message, query_embedding, reply)
        return ChatAnswer(reply=reply, context=context, sources=sources)

    # --- Steps ---
    @staticmethod
    def normalize_message(text: str) -> str:
        return " ".join((text or "").strip().split())

    def retrieve_relevant(self, query_embedding: List[float]) -> List[SimilarityResult]:
        """Top-k matches strictly above the relevance floor."""
        matches = self.vector_store.query(query_embedding, self.top_k)
        relevant = [m for m in matches if m.similarity > self.relevance_threshold]
        self.logger.info(
            "Retrieved documents",
            extra={
                "requested": self.top_k,
                "returned": len(matches),
                "relevant": len(relevant),
                "top_score": round(matches[0].similarity, 3) if matches else None,
                "request_id": self.request_id,
            },
        )
        return relevant

    @staticmethod
    def build_context(results: Sequence[SimilarityResult]) -> str:
        fragments: List[str] = []
        for result in results:
            meta = result.document.metadata
            title = meta.get("title")
            content = meta.get("content", "")
            if result.document.type is DocumentType.PAGE and title:
                fragments.append(f"{title}: {content}")
            else:
                fragments.append(content)
        return "\n\n".join(fragments)

    @staticmethod
    def _build_messages(message: str, context: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT.format(context=context or NO_CONTEXT)},
            {"role": "user", "content": message},
        ]

    def _embed(self, text: str) -> List[float] | None:
        try:
            embedding = self.embeddings_client.embed_text(text)
        except Exception:
            self.logger.exception("Failed to embed text", extra={"request_id": self.request_id})
            return None
        return embedding or None

    def _learn_from_turn(self, message: str, message_embedding: List[float] | None, reply: str) -> None:
        token = self.token_factory()
        if message_embedding is None:
            message_embedding = self._embed(message)
        self._remember(f"conversation_{token}", message, message_embedding, role="user")
        self._remember(f"response_{token + 1}", reply, self._embed(reply), role="assistant")

    def _remember(self, doc_id: str, content: str, embedding: List[float] | None, role: str) -> None:
        if not embedding:
            self.logger.info("Skipping self-training for turn", extra={"id": doc_id, "role": role})
            return
        self.vector_store.upsert(
            Document(
                id=doc_id,
                embedding=embedding,
                metadata={"content": content, "type": DocumentType.CONVERSATION.value, "role": role},
            )
        )


__all__ = ["SupportChatService", "ChatAnswer", "FALLBACK_REPLY", "SYSTEM_PROMPT"]
