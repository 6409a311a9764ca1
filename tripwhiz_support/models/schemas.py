from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal

from pydantic import BaseModel, Field


# Content
class SitePage(BaseModel):
    """One page of the public site used as knowledge source."""

    url: str = Field(..., min_length=1, description="Site-relative URL, used as document id")
    title: str = Field(default="", description="Page title")
    content: str = Field(..., description="Plain-text page summary")


# Admin
class RefreshResponse(BaseModel):
    """Outcome of a knowledge base refresh."""

    status: Literal["completed", "failed", "skipped", "cancelled"]
    indexed_pages: int = Field(..., ge=0, description="Pages embedded and stored")
    failed_pages: int = Field(default=0, ge=0, description="Pages skipped because embedding failed")
    preserved_conversations: int = Field(default=0, ge=0, description="Conversation documents carried over")
    elapsed_sec: float | None = Field(None, ge=0, description="Seconds the refresh took")


class StatsResponse(BaseModel):
    total_documents: int
    by_type: Dict[str, int]
    ready: bool
    last_refresh_at: datetime | None = None


# Chat
class ChatRequest(BaseModel):
    """User message for the support assistant."""

    message: str = Field(..., min_length=1, description="User message")


class ChatSource(BaseModel):
    id: str
    similarity: float
    type: str
    title: str | None = None
    url: str | None = None


class ChatResponse(BaseModel):
    reply: str
    context_used: bool
    fallback: bool = False
    sources: List[ChatSource] = Field(default_factory=list)


__all__ = [
    "SitePage",
    "RefreshResponse",
    "StatsResponse",
    "ChatRequest",
    "ChatSource",
    "ChatResponse",
]
