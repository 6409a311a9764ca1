"""
CLI to rebuild the support knowledge base from the site map.

Example:
    python -m scripts.refresh_knowledge --force
"""

from __future__ import annotations

import argparse
import logging
import sys

from tripwhiz_support.config import settings, setup_logging
from tripwhiz_support.content.source import get_content_source
from tripwhiz_support.embeddings.client import EmbeddingsClient
from tripwhiz_support.knowledge.refresh import KnowledgeRefreshService
from tripwhiz_support.vector_store import get_slot, get_vector_store


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh the support knowledge base.")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Refresh even if the knowledge base is still fresh.",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.refresh_request_delay_sec,
        help="Pause between embedding requests, seconds.",
    )
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    store = get_vector_store()
    store.init()
    service = KnowledgeRefreshService(
        store,
        EmbeddingsClient(),
        get_content_source(),
        state_slot=get_slot(settings.knowledge_state_key),
        request_delay_sec=args.delay,
        show_progress=True,
        logger_=logger,
    )

    try:
        summary = service.refresh() if args.force else service.ensure_fresh()
    except Exception:
        logger.exception("Refresh failed")
        sys.exit(1)
    finally:
        store.dispose()

    if summary is None:
        print(f"Knowledge base is fresh (last refresh {service.last_refresh_at}), nothing to do")
        return
    print(
        f"{summary.status}: indexed {summary.indexed_pages} pages, "
        f"{summary.failed_pages} failed, kept {summary.preserved_conversations} conversation docs "
        f"(elapsed {summary.elapsed_sec:.2f}s)"
    )
    if summary.status == "failed":
        sys.exit(1)


if __name__ == "__main__":
    main()
