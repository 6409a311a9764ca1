"""
Vector store abstractions and factories.
"""

from tripwhiz_support.config import settings
from tripwhiz_support.vector_store.base import Document, DocumentType, SimilarityResult, StoreStats, VectorStore
from tripwhiz_support.vector_store.memory_store import SimilarityStore
from tripwhiz_support.vector_store.persistence import InMemorySlot, JsonFileSlot, KeyValueSlot

DEFAULT_VECTOR_STORE_BACKEND = settings.vector_store_backend


def get_slot(key: str, backend: str | None = None) -> KeyValueSlot:
    """
    Factory for the key-value slot a persisted component writes to.
    """
    backend = (backend or DEFAULT_VECTOR_STORE_BACKEND).lower()
    if backend == "json_file":
        return JsonFileSlot(settings.vector_store_path, key)
    if backend == "memory":
        return InMemorySlot(key)
    raise ValueError(f"Unsupported vector store backend: {backend}")


def get_vector_store(backend: str | None = None) -> SimilarityStore:
    """
    Factory to obtain the configured store. Call `init()` before use.
    """
    return SimilarityStore(get_slot(settings.vector_store_key, backend))


__all__ = [
    "DEFAULT_VECTOR_STORE_BACKEND",
    "get_slot",
    "get_vector_store",
    "Document",
    "DocumentType",
    "SimilarityResult",
    "StoreStats",
    "VectorStore",
    "SimilarityStore",
    "InMemorySlot",
    "JsonFileSlot",
    "KeyValueSlot",
]
