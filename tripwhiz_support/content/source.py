"""
Content sources: where the knowledge refresh gets its page snapshot from.
"""

from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

import httpx
from pydantic import TypeAdapter

from tripwhiz_support.config import settings
from tripwhiz_support.content.sitemap import DEFAULT_SITE_PAGES
from tripwhiz_support.models.schemas import SitePage

logger = logging.getLogger(__name__)

_PAGES_ADAPTER = TypeAdapter(List[SitePage])


class ContentSource(Protocol):
    def fetch_pages(self) -> List[SitePage]:
        ...


class StaticSitemapSource:
    """Serves a fixed list of pages (the built-in site map by default)."""

    def __init__(self, pages: Sequence[SitePage] = DEFAULT_SITE_PAGES) -> None:
        self.pages = list(pages)

    def fetch_pages(self) -> List[SitePage]:
        return [page.model_copy() for page in self.pages]


class HttpSitemapSource:
    """
    Fetches a full site snapshot from an HTTP endpoint returning
    `[{"url": ..., "title": ..., "content": ...}, ...]`.

    Raises httpx.HTTPError on transport/status failures and
    pydantic.ValidationError on a malformed payload.
    """

    def __init__(
        self,
        url: str,
        timeout: float = settings.request_timeout_sec,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.client = client

    def fetch_pages(self) -> List[SitePage]:
        if self.client is not None:
            response = self.client.get(self.url)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(self.url)
        response.raise_for_status()
        pages = _PAGES_ADAPTER.validate_json(response.content)
        logger.info("Fetched site map", extra={"url": self.url, "pages": len(pages)})
        return pages


def get_content_source() -> ContentSource:
    if settings.content_source_url:
        return HttpSitemapSource(settings.content_source_url)
    return StaticSitemapSource()


__all__ = ["ContentSource", "StaticSitemapSource", "HttpSitemapSource", "get_content_source"]
