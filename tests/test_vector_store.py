"""Unit tests for tripwhiz_support.vector_store (similarity store + persistence)."""
import json
from datetime import datetime

import pytest

from tripwhiz_support.vector_store import get_slot, get_vector_store
from tripwhiz_support.vector_store.base import Document, DocumentType
from tripwhiz_support.vector_store.memory_store import SimilarityStore
from tripwhiz_support.vector_store.persistence import InMemorySlot, JsonFileSlot


def _doc(doc_id, embedding, content="text", kind="page", **extra):
    return Document(id=doc_id, embedding=embedding, metadata={"content": content, "type": kind, **extra})


class BrokenSlot(InMemorySlot):
    def write(self, value):
        raise OSError("quota exceeded")


def test_upsert_replaces_existing_id(store):
    store.upsert(_doc("x", [1.0, 0.0]))
    first = store.list()[0].metadata["timestamp"]
    store.upsert(_doc("x", [0.0, 1.0]))

    docs = store.list()
    assert len(docs) == 1
    assert docs[0].embedding == [0.0, 1.0]
    assert datetime.fromisoformat(docs[0].metadata["timestamp"]) >= datetime.fromisoformat(first)


def test_upsert_overwrites_caller_timestamp(store, clock):
    store.upsert(_doc("x", [1.0], timestamp="1999-01-01T00:00:00"))
    assert store.list()[0].metadata["timestamp"].startswith("2026-01-01")


def test_upsert_copies_caller_document(store):
    doc = _doc("x", [1.0, 0.0])
    store.upsert(doc)
    doc.metadata["content"] = "changed"
    doc.embedding.append(5.0)
    stored = store.list()[0]
    assert stored.content == "text"
    assert stored.embedding == [1.0, 0.0]


def test_query_orders_by_similarity(store):
    store.upsert(_doc("far", [0.0, 1.0]))
    store.upsert(_doc("near", [1.0, 0.1]))
    store.upsert(_doc("exact", [2.0, 0.0]))

    results = store.query([1.0, 0.0], 2)
    assert [r.document.id for r in results] == ["exact", "near"]
    assert results[0].similarity == pytest.approx(1.0)
    assert results[0].similarity >= results[1].similarity


def test_query_with_large_k_returns_every_document_once(store):
    for i in range(4):
        store.upsert(_doc(f"d{i}", [float(i), 1.0]))
    results = store.query([1.0, 1.0], 10)
    assert sorted(r.document.id for r in results) == ["d0", "d1", "d2", "d3"]
    scores = [r.similarity for r in results]
    assert scores == sorted(scores, reverse=True)


def test_query_ties_keep_insertion_order(store):
    store.upsert(_doc("first", [1.0, 1.0]))
    store.upsert(_doc("second", [1.0, 1.0]))
    store.upsert(_doc("third", [1.0, 1.0]))
    assert [r.document.id for r in store.query([1.0, 1.0], 3)] == ["first", "second", "third"]


def test_query_non_positive_k_returns_nothing(store):
    store.upsert(_doc("x", [1.0]))
    assert store.query([1.0], 0) == []


def test_query_tolerates_dimension_mismatch(store):
    store.upsert(_doc("two", [1.0, 0.0]))
    store.upsert(_doc("three", [1.0, 0.0, 0.0]))
    results = store.query([1.0, 0.0], 2)
    assert results[0].document.id == "two"
    assert results[1].similarity == 0.0


def test_query_does_not_mutate_store(store):
    store.upsert(_doc("x", [1.0, 0.0]))
    result = store.query([1.0, 0.0], 1)[0]
    result.document.metadata["content"] = "changed"
    assert store.list()[0].content == "text"


def test_list_returns_snapshot(store):
    store.upsert(_doc("x", [1.0]))
    docs = store.list()
    docs.clear()
    assert store.count() == 1


def test_stats_groups_by_type(store):
    store.upsert(_doc("p1", [1.0], kind="page"))
    store.upsert(_doc("p2", [1.0], kind="page"))
    store.upsert(_doc("c1", [1.0], kind="conversation"))
    store.upsert(Document(id="n", embedding=[1.0], metadata={"content": "untagged"}))
    store.upsert(_doc("z", [1.0], kind="newsletter"))

    stats = store.stats()
    assert stats.total_documents == 5
    assert stats.by_type == {"page": 2, "conversation": 1, "unknown": 1, "newsletter": 1}


def test_document_type_of_unknown_tag():
    assert DocumentType.of({"type": "faq"}) is DocumentType.FAQ
    assert DocumentType.of({"type": "something-new"}) is DocumentType.UNKNOWN
    assert DocumentType.of(None) is DocumentType.UNKNOWN


def test_every_mutation_is_written_through(store, slot, clock):
    store.upsert(_doc("x", [1.0, 0.0]))
    persisted = json.loads(slot.read())
    assert [d["id"] for d in persisted] == ["x"]

    reloaded = SimilarityStore(slot, clock=clock)
    reloaded.init()
    assert [d.to_dict() for d in reloaded.list()] == [d.to_dict() for d in store.list()]

    store.clear()
    assert json.loads(slot.read()) == []


@pytest.mark.parametrize("blob", ["{not json", '{"id": "x"}', "42"])
def test_corrupt_blob_loads_as_empty(blob):
    slot = InMemorySlot("s", {"s": blob})
    s = SimilarityStore(slot)
    s.init()
    assert s.count() == 0


def test_malformed_entries_skipped_and_duplicates_collapsed():
    payload = [
        {"id": "a", "embedding": [1.0], "metadata": {"content": "old"}},
        {"id": "b", "embedding": "nope", "metadata": {}},
        "garbage",
        {"id": "a", "embedding": [2.0], "metadata": {"content": "new"}},
    ]
    s = SimilarityStore(InMemorySlot("s", {"s": json.dumps(payload)}))
    s.init()
    docs = s.list()
    assert len(docs) == 1
    assert docs[0].content == "new"


def test_persist_failure_keeps_in_memory_state():
    s = SimilarityStore(BrokenSlot("s"))
    s.init()
    s.upsert(_doc("x", [1.0]))
    assert s.count() == 1
    s.clear()
    assert s.count() == 0


def test_dispose_flushes_and_releases(store, slot):
    store.upsert(_doc("x", [1.0]))
    store.dispose()
    assert store.count() == 0
    assert [d["id"] for d in json.loads(slot.read())] == ["x"]


def test_json_file_slot_round_trip(tmp_path, clock):
    slot = JsonFileSlot(tmp_path / "kb", "tripwhiz_vector_store")
    assert slot.read() is None

    s = SimilarityStore(slot, clock=clock)
    s.init()
    s.upsert(_doc("/a", [1.0, 0.0], content="alpha"))

    assert (tmp_path / "kb" / "tripwhiz_vector_store.json").exists()
    reloaded = SimilarityStore(JsonFileSlot(tmp_path / "kb", "tripwhiz_vector_store"))
    reloaded.init()
    assert reloaded.list()[0].content == "alpha"


def test_factory_backends():
    assert isinstance(get_slot("k", "memory"), InMemorySlot)
    assert isinstance(get_slot("k", "json_file"), JsonFileSlot)
    assert isinstance(get_vector_store("memory"), SimilarityStore)
    with pytest.raises(ValueError):
        get_slot("k", "chroma")


def test_mutations_after_dispose_leave_slot_untouched(store, slot):
    store.upsert(_doc("conversation_1", [1.0], kind="conversation"))
    store.dispose()

    store.upsert(_doc("/p0", [1.0]))
    store.clear()
    assert store.retain(lambda doc: True) == 0

    assert [d["id"] for d in json.loads(slot.read())] == ["conversation_1"]
    store.init()
    store.upsert(_doc("/p0", [1.0]))
    assert [d.id for d in store.list()] == ["conversation_1", "/p0"]


def test_retain_keeps_matching_documents(store, slot):
    store.upsert(_doc("/a", [1.0], kind="page"))
    store.upsert(_doc("c1", [1.0], kind="conversation"))
    store.upsert(_doc("/b", [1.0], kind="page"))

    kept = store.retain(lambda doc: doc.type is DocumentType.CONVERSATION)

    assert kept == 1
    assert [d.id for d in store.list()] == ["c1"]
    assert [d["id"] for d in json.loads(slot.read())] == ["c1"]
