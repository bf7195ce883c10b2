# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Document collections used by the credential store and the task store.

Two backends share the same query code:
- ``memory``: documents live in a list (tests, throwaway runs)
- ``yaml``: one ``<name>.yml`` file per collection under the data dir

Each mutation runs under the collection lock, so a find-and-modify is atomic
per record. Documents handed out are copies; mutating them never touches the
stored state.
"""

from __future__ import annotations

import copy
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DuplicateKeyError(Exception):
    """Insert would violate a unique field."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for '{field}'")


def _matches(doc: Document, filt: Optional[Document]) -> bool:
    if not filt:
        return True
    return all(doc.get(k) == v for k, v in filt.items())


class Collection:
    """Base collection. Subclasses provide ``_read`` and ``_write``."""

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.RLock()

    def _read(self) -> List[Document]:
        raise NotImplementedError

    def _write(self, docs: List[Document]) -> None:
        raise NotImplementedError

    def insert_one(self, doc: Document, *, unique: Iterable[str] = ()) -> Document:
        with self._lock:
            docs = self._read()
            for field in unique:
                value = doc.get(field)
                if any(d.get(field) == value for d in docs):
                    raise DuplicateKeyError(field, value)
            docs.append(copy.deepcopy(doc))
            self._write(docs)
        return copy.deepcopy(doc)

    def find(self, filt: Optional[Document] = None) -> List[Document]:
        with self._lock:
            docs = [d for d in self._read() if _matches(d, filt)]
        return copy.deepcopy(docs)

    def find_one(self, filt: Optional[Document] = None) -> Optional[Document]:
        with self._lock:
            for d in self._read():
                if _matches(d, filt):
                    return copy.deepcopy(d)
        return None

    def find_one_and_update(self, filt: Document, changes: Document) -> Optional[Document]:
        """Apply ``changes`` to the first match and return the updated document."""
        with self._lock:
            docs = self._read()
            for d in docs:
                if _matches(d, filt):
                    d.update(copy.deepcopy(changes))
                    self._write(docs)
                    return copy.deepcopy(d)
        return None

    def find_one_and_delete(self, filt: Document) -> Optional[Document]:
        with self._lock:
            docs = self._read()
            for i, d in enumerate(docs):
                if _matches(d, filt):
                    del docs[i]
                    self._write(docs)
                    return d
        return None

    def count(self, filt: Optional[Document] = None) -> int:
        with self._lock:
            return sum(1 for d in self._read() if _matches(d, filt))


class MemoryCollection(Collection):
    def __init__(self, name: str):
        super().__init__(name)
        self._docs: List[Document] = []

    def _read(self) -> List[Document]:
        return self._docs

    def _write(self, docs: List[Document]) -> None:
        self._docs = docs


class YamlCollection(Collection):
    """Collection persisted as ``{"version": 1, "documents": [...]}`` in a YAML file."""

    def __init__(self, name: str, path: Path):
        super().__init__(name)
        self.path = Path(path)

    def _read(self) -> List[Document]:
        if not self.path.exists():
            return []
        raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        docs = raw.get("documents") if isinstance(raw, dict) else None
        return [d for d in (docs or []) if isinstance(d, dict)]

    def _write(self, docs: List[Document]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = yaml.safe_dump(
            {"version": 1, "documents": docs}, sort_keys=False, allow_unicode=True
        )
        # Write to a sibling temp file, then swap it in.
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self.path)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class DocumentStore:
    """Named collections over one backend."""

    def __init__(self, kind: str = "memory", data_dir: Optional[Path] = None):
        kind = (kind or "memory").strip().lower()
        if kind not in {"memory", "yaml"}:
            raise ValueError(f"Unknown document store '{kind}' (use 'memory' or 'yaml')")
        if kind == "yaml" and data_dir is None:
            raise ValueError("The yaml document store needs a data directory")
        self.kind = kind
        self.data_dir = Path(data_dir).resolve() if data_dir is not None else None
        self._collections: Dict[str, Collection] = {}
        self._lock = threading.Lock()
        logger.info("DocumentStore ready kind=%s data_dir=%s", self.kind, self.data_dir)

    def collection(self, name: str) -> Collection:
        with self._lock:
            coll = self._collections.get(name)
            if coll is None:
                if self.kind == "yaml":
                    coll = YamlCollection(name, self.data_dir / f"{name}.yml")
                else:
                    coll = MemoryCollection(name)
                self._collections[name] = coll
            return coll
