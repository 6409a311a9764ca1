"""
Durable key-value slots backing the similarity store.

A slot holds one serialized blob under a fixed key. Writes replace the whole
blob; there is no versioning, so a format change means wiping the slot.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol


class KeyValueSlot(Protocol):
    key: str

    def read(self) -> str | None:
        ...

    def write(self, value: str) -> None:
        ...


class JsonFileSlot:
    """One `<key>.json` file under a directory, replaced atomically on write."""

    def __init__(self, directory: str | Path, key: str) -> None:
        self.directory = Path(directory)
        self.key = key
        self.path = self.directory / f"{key}.json"

    def read(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{self.key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def __repr__(self) -> str:
        return f"JsonFileSlot(path={str(self.path)!r})"


class InMemorySlot:
    """Process-local slot. Several slots may share one `backing` dict."""

    def __init__(self, key: str, backing: Dict[str, str] | None = None) -> None:
        self.key = key
        self.backing = backing if backing is not None else {}

    def read(self) -> str | None:
        return self.backing.get(self.key)

    def write(self, value: str) -> None:
        self.backing[self.key] = value

    def __repr__(self) -> str:
        return f"InMemorySlot(key={self.key!r})"


__all__ = ["KeyValueSlot", "JsonFileSlot", "InMemorySlot"]
