"""
Exact linear-scan similarity store with write-through persistence.

Every document lives in memory; each mutation serializes the whole
collection into a single key-value slot. Queries score every document, so
this is only meant for small knowledge bases (tens to low hundreds of docs).
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from tripwhiz_support.vector_store.base import (
    Document,
    DocumentType,
    SimilarityResult,
    StoreStats,
    VectorStore,
)
from tripwhiz_support.vector_store.persistence import KeyValueSlot
from tripwhiz_support.vector_store.similarity import cosine_similarity

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SimilarityStore(VectorStore):
    def __init__(self, slot: KeyValueSlot, clock: Callable[[], datetime] = _utcnow) -> None:
        self.slot = slot
        self.clock = clock
        self._documents: List[Document] = []
        self._lock = threading.RLock()
        self._disposed = False

    # --- Lifecycle ---
    def init(self) -> None:
        """Load the persisted collection. Missing or corrupt data yields an empty store."""
        with self._lock:
            self._documents = self._load()
            self._disposed = False
        logger.info("SimilarityStore initialised", extra={"slot": repr(self.slot), "documents": len(self._documents)})

    def dispose(self) -> None:
        """Flush and release. Later mutations are dropped until `init()` runs again."""
        with self._lock:
            self._persist()
            self._documents = []
            self._disposed = True
        logger.info("SimilarityStore disposed", extra={"slot": repr(self.slot)})

    # --- Mutations ---
    def upsert(self, document: Document) -> None:
        stored = Document(
            id=document.id,
            embedding=[float(x) for x in document.embedding],
            metadata={**copy.deepcopy(document.metadata), "timestamp": self.clock().isoformat()},
        )
        with self._lock:
            if self._disposed:
                logger.warning("Dropping upsert on disposed store", extra={"id": stored.id})
                return
            self._documents = [doc for doc in self._documents if doc.id != stored.id]
            self._documents.append(stored)
            self._persist()

    def clear(self) -> None:
        self.retain(lambda doc: False)

    def retain(self, keep: Callable[[Document], bool]) -> int:
        """Drop every document `keep` rejects, in one locked step. Returns how many remain."""
        with self._lock:
            if self._disposed:
                logger.warning("Dropping retain on disposed store", extra={"slot": repr(self.slot)})
                return 0
            self._documents = [doc for doc in self._documents if keep(doc)]
            self._persist()
            kept = len(self._documents)
        logger.info("SimilarityStore pruned", extra={"slot": repr(self.slot), "kept": kept})
        return kept

    # --- Reads ---
    def query(self, vector: List[float], k: int) -> List[SimilarityResult]:
        if k <= 0:
            return []

        with self._lock:
            scored = [SimilarityResult(document=doc, similarity=cosine_similarity(vector, doc.embedding)) for doc in self._documents]

        # sorted() is stable, so equal scores keep insertion order
        ranked = sorted(scored, key=lambda r: r.similarity, reverse=True)[:k]
        return [SimilarityResult(document=copy.deepcopy(r.document), similarity=r.similarity) for r in ranked]

    def list(self) -> List[Document]:
        with self._lock:
            return copy.deepcopy(self._documents)

    def stats(self) -> StoreStats:
        by_type: Dict[str, int] = {}
        with self._lock:
            for doc in self._documents:
                kind = str(doc.metadata.get("type") or DocumentType.UNKNOWN.value)
                by_type[kind] = by_type.get(kind, 0) + 1
            return StoreStats(total_documents=len(self._documents), by_type=by_type)

    def count(self) -> int:
        with self._lock:
            return len(self._documents)

    def __len__(self) -> int:
        return self.count()

    # --- Persistence ---
    def _persist(self) -> None:
        if self._disposed:
            return
        # Best effort: the in-memory state stays ahead if the write fails.
        try:
            self.slot.write(json.dumps([doc.to_dict() for doc in self._documents]))
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to persist vector store", extra={"slot": repr(self.slot)})

    def _load(self) -> List[Document]:
        try:
            raw = self.slot.read()
        except OSError:
            logger.exception("Failed to read vector store", extra={"slot": repr(self.slot)})
            return []
        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Persisted vector store is corrupt, starting empty", extra={"slot": repr(self.slot)})
            return []
        if not isinstance(payload, list):
            logger.warning("Persisted vector store has unexpected shape, starting empty", extra={"slot": repr(self.slot)})
            return []

        by_id: Dict[str, Document] = {}
        skipped = 0
        for entry in payload:
            doc = self._decode(entry)
            if doc is None:
                skipped += 1
                continue
            by_id.pop(doc.id, None)
            by_id[doc.id] = doc

        if skipped:
            logger.warning("Skipped malformed persisted documents", extra={"skipped": skipped})
        return list(by_id.values())

    @staticmethod
    def _decode(entry: Any) -> Document | None:
        if not isinstance(entry, dict):
            return None
        doc_id = entry.get("id")
        embedding = entry.get("embedding")
        metadata = entry.get("metadata")
        if not isinstance(doc_id, str) or not isinstance(embedding, list) or not isinstance(metadata, dict):
            return None
        return Document(id=doc_id, embedding=embedding, metadata=metadata)


__all__ = ["SimilarityStore"]
