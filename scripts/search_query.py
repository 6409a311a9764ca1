"""
CLI to search the knowledge base by one or more text queries.

Example:
    python -m scripts.search_query -q "carry-on baggage fees" -q "price alerts" --top-k 5
"""

from __future__ import annotations

import argparse

from tripwhiz_support.embeddings.client import EmbeddingsClient
from tripwhiz_support.vector_store import get_vector_store


def main() -> None:
    parser = argparse.ArgumentParser(description="Search stored documents by text query.")
    parser.add_argument("--query", "-q", action="append", required=True, help="Query text (repeatable)")
    parser.add_argument("--top-k", type=int, default=5, help="How many results to return per query")
    parser.add_argument("--snippet", type=int, default=300, help="Snippet length")
    args = parser.parse_args()

    vs = get_vector_store()
    vs.init()
    emb = EmbeddingsClient()

    # one embeddings request per batch of queries
    vectors = emb.embed_texts(args.query)

    for query, q_vec in zip(args.query, vectors):
        print(f"\n=== {query}")
        results = vs.query(q_vec, args.top_k)
        if not results:
            print("No results")
            continue

        for idx, result in enumerate(results, start=1):
            doc = result.document
            snippet = doc.content[: args.snippet].replace("\n", " ")
            print(f"\n#{idx} similarity={result.similarity:.4f} id={doc.id}")
            print("metadata:", {k: v for k, v in doc.metadata.items() if k != "content"})
            print("text:", snippet + ("..." if len(doc.content) > args.snippet else ""))


if __name__ == "__main__":
    main()
