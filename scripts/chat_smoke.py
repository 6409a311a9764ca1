"""
Simple smoke test of the support chat pipeline.

Example:
    python -m scripts.chat_smoke --message "How does the VPN trick work?"
"""

from __future__ import annotations

import argparse
import logging
import sys

from tripwhiz_support.config import setup_logging
from tripwhiz_support.session import SupportSession


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Smoke test of the support chat pipeline.")
    parser.add_argument("--message", "-m", required=True, help="Message for the support assistant")
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    session = SupportSession.from_settings()
    session.scheduler = None
    session.init()
    session.refresh_service.ensure_fresh()

    service = session.chat_service()
    try:
        answer = service.respond(args.message)
    except Exception:
        logger.exception("Chat smoke failed")
        sys.exit(1)
    finally:
        session.dispose()

    print("\n=== Chat Smoke Result ===")
    print(f"fallback: {answer.fallback}")
    print(f"reply:\n{answer.reply}")
    print("\nSources:")
    if answer.sources:
        for idx, result in enumerate(answer.sources, start=1):
            print(f"#{idx} {result.similarity:.3f} {result.document.type.value} id={result.document.id}")
    else:
        print("  <none>")


if __name__ == "__main__":
    main()
