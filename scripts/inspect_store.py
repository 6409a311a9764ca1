"""
Utility script to inspect stored documents without embeddings.

Usage:
    python -m scripts.inspect_store --limit 5 --offset 0 --type page
"""

from __future__ import annotations

import argparse
import json

from tripwhiz_support.vector_store import get_vector_store
from tripwhiz_support.vector_store.base import DocumentType


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect stored knowledge base documents.")
    parser.add_argument("--limit", type=int, default=5, help="Number of documents to show")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination")
    parser.add_argument(
        "--type",
        choices=[t.value for t in DocumentType],
        default=None,
        help="Only show documents of this type",
    )
    args = parser.parse_args()

    store = get_vector_store()
    store.init()
    stats = store.stats()
    docs = store.list()
    if args.type:
        docs = [d for d in docs if d.type.value == args.type]
    page = docs[args.offset : args.offset + args.limit]

    print(f"Total documents in store: {stats.total_documents} {json.dumps(stats.by_type)}")
    print(f"Showing {len(page)} documents (offset={args.offset}, limit={args.limit})")
    for idx, doc in enumerate(page, start=1):
        meta = {k: v for k, v in doc.metadata.items() if k != "content"}
        print(f"\n#{idx}: {doc.id} (dim={len(doc.embedding)})")
        print("Metadata:", json.dumps(meta, ensure_ascii=False))
        snippet = doc.content[:400].replace("\n", " ")
        print("Text:", snippet + ("..." if len(doc.content) > 400 else ""))


if __name__ == "__main__":
    main()
