from __future__ import annotations

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from tripwhiz_support.config import settings
from tripwhiz_support.content.sitemap import DEFAULT_SITE_PAGES
from tripwhiz_support.models.schemas import (
    ChatRequest,
    ChatResponse,
    ChatSource,
    RefreshResponse,
    SitePage,
    StatsResponse,
)
from tripwhiz_support.session import SupportSession

router = APIRouter()
logger = logging.getLogger(__name__)


def get_session(request: Request) -> SupportSession:
    return request.app.state.session


def _check_admin_token(x_admin_token: str | None) -> None:
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Admin token is not configured",
        )
    if x_admin_token != settings.admin_token.get_secret_value():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


@router.get("/api/sitemap", response_model=List[SitePage], summary="Built-in site map")
def sitemap() -> List[SitePage]:
    return DEFAULT_SITE_PAGES


@router.post("/admin/refresh", response_model=RefreshResponse, summary="Refresh knowledge base")
def admin_refresh(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
    session: SupportSession = Depends(get_session),
) -> RefreshResponse:
    _check_admin_token(x_admin_token)
    logger.info("Admin refresh requested")

    summary = session.refresh_service.refresh()
    response = RefreshResponse(
        status=summary.status,
        indexed_pages=summary.indexed_pages,
        failed_pages=summary.failed_pages,
        preserved_conversations=summary.preserved_conversations,
        elapsed_sec=round(summary.elapsed_sec, 2),
    )
    logger.info(
        "Admin refresh finished",
        extra={"status": response.status, "indexed_pages": response.indexed_pages},
    )
    return response


@router.get("/api/v1/knowledge/stats", response_model=StatsResponse, summary="Knowledge base statistics")
def knowledge_stats(session: SupportSession = Depends(get_session)) -> StatsResponse:
    stats = session.vector_store.stats()
    return StatsResponse(
        total_documents=stats.total_documents,
        by_type=stats.by_type,
        ready=session.refresh_service.is_ready,
        last_refresh_at=session.refresh_service.last_refresh_at,
    )


@router.post("/api/v1/chat", response_model=ChatResponse, summary="Ask the support assistant")
def chat(request: ChatRequest, session: SupportSession = Depends(get_session)) -> ChatResponse:
    message = (request.message or "").strip()
    if not message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message must not be empty")

    request_id = uuid.uuid4().hex
    logger.info("Chat request", extra={"len": len(message), "request_id": request_id})
    answer = session.chat_service(request_id=request_id).respond(message)
    return ChatResponse(
        reply=answer.reply,
        context_used=answer.context_used,
        fallback=answer.fallback,
        sources=[
            ChatSource(
                id=result.document.id,
                similarity=round(result.similarity, 4),
                type=result.document.type.value,
                title=result.document.metadata.get("title"),
                url=result.document.metadata.get("url"),
            )
            for result in answer.sources
        ],
    )


__all__ = ["router", "get_session"]
