"""
Vector store interface and shared types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Protocol


class DocumentType(str, Enum):
    PAGE = "page"
    CONVERSATION = "conversation"
    FAQ = "faq"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, metadata: Mapping[str, Any] | None) -> "DocumentType":
        """Tag of a stored document; anything unrecognised maps to UNKNOWN."""
        raw = (metadata or {}).get("type")
        try:
            return cls(raw)
        except (TypeError, ValueError):
            return cls.UNKNOWN


@dataclass
class Document:
    id: str
    embedding: List[float]
    metadata: Dict[str, Any]

    @property
    def type(self) -> DocumentType:
        return DocumentType.of(self.metadata)

    @property
    def content(self) -> str:
        return self.metadata.get("content", "")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "embedding": list(self.embedding), "metadata": dict(self.metadata)}


@dataclass
class SimilarityResult:
    document: Document
    similarity: float


@dataclass
class StoreStats:
    total_documents: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)


class VectorStore(Protocol):
    def init(self) -> None:
        ...

    def dispose(self) -> None:
        ...

    def upsert(self, document: Document) -> None:
        ...

    def query(self, vector: List[float], k: int) -> List[SimilarityResult]:
        ...

    def list(self) -> List[Document]:
        ...

    def clear(self) -> None:
        ...

    def retain(self, keep: Callable[[Document], bool]) -> int:
        ...

    def stats(self) -> StoreStats:
        ...

    def count(self) -> int:
        ...


__all__ = ["Document", "DocumentType", "SimilarityResult", "StoreStats", "VectorStore"]
