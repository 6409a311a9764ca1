"""Shared fakes and fixtures for the support knowledge base tests."""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tripwhiz_support.content.source import StaticSitemapSource
from tripwhiz_support.knowledge.refresh import KnowledgeRefreshService
from tripwhiz_support.models.schemas import SitePage
from tripwhiz_support.vector_store.memory_store import SimilarityStore
from tripwhiz_support.vector_store.persistence import InMemorySlot


class FakeEmbeddings:
    """Maps known texts to fixed vectors; texts in `failing` raise."""

    def __init__(self, mapping=None, default=None, failing=()):
        self.mapping = dict(mapping or {})
        self.default = default
        self.failing = set(failing)
        self.calls = []

    def embed_text(self, text):
        self.calls.append(text)
        if text in self.failing:
            raise RuntimeError(f"embedding service unavailable for {text!r}")
        if text in self.mapping:
            return list(self.mapping[text])
        return list(self.default) if self.default is not None else []


class FakeLLM:
    def __init__(self, reply="Happy to help!", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def chat(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


class TickingClock:
    """Each call returns a time one second later than the previous one."""

    def __init__(self, start=datetime(2026, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def backing():
    return {}


@pytest.fixture
def slot(backing):
    return InMemorySlot("tripwhiz_vector_store", backing)


@pytest.fixture
def store(slot, clock):
    s = SimilarityStore(slot, clock=clock)
    s.init()
    return s


@pytest.fixture
def pages():
    return [
        SitePage(url="/a", title="A", content="alpha"),
        SitePage(url="/b", title="B", content="beta"),
    ]


@pytest.fixture
def embeddings():
    return FakeEmbeddings({"A: alpha": [1.0, 0.0], "B: beta": [0.0, 1.0]})


@pytest.fixture
def make_refresh(store, embeddings, backing):
    def _make(pages, embeddings_client=None, **kwargs):
        kwargs.setdefault("request_delay_sec", 0)
        kwargs.setdefault("state_slot", InMemorySlot("tripwhiz_knowledge_state", backing))
        return KnowledgeRefreshService(
            store,
            embeddings_client or embeddings,
            StaticSitemapSource(pages),
            **kwargs,
        )

    return _make
