from __future__ import annotations

import copy
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Mapping, Optional

from bson import ObjectId, json_util
from pymongo.results import DeleteResult, InsertManyResult

from settings import Settings


class InMemoryCollection:
    """Thread-safe stand-in for the handful of collection calls the seeder makes."""

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._documents: List[Dict[str, Any]] = []
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def insert_many(
        self, documents: Iterable[Dict[str, Any]], ordered: bool = True
    ) -> InsertManyResult:
        inserted_ids: List[Any] = []
        with self._lock:
            for document in documents:
                # pymongo assigns _id on the caller's document as well
                document.setdefault("_id", ObjectId())
                self._documents.append(copy.deepcopy(document))
                inserted_ids.append(document["_id"])
        return InsertManyResult(inserted_ids, True)

    def delete_many(self, filter: Mapping[str, Any]) -> DeleteResult:
        with self._lock:
            kept = [doc for doc in self._documents if not _matches(doc, filter)]
            deleted = len(self._documents) - len(kept)
            self._documents = kept
        return DeleteResult({"n": deleted, "ok": 1.0}, True)

    def count_documents(self, filter: Mapping[str, Any]) -> int:
        with self._lock:
            return sum(1 for doc in self._documents if _matches(doc, filter))

    def find(self, filter: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return deep copies of the stored documents matching ``filter``."""

        with self._lock:
            return [
                copy.deepcopy(doc) for doc in self._documents if _matches(doc, filter or {})
            ]

    def drop(self) -> None:
        with self._lock:
            self._documents = []
            if self.persistence_path and self.persistence_path.exists():
                self.persistence_path.unlink()

    def flush(self) -> None:
        """Write the current documents to ``persistence_path`` in one pass."""

        with self._lock:
            self._persist()

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        self.persistence_path.write_text(json_util.dumps(self._documents, indent=2))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "[]"
            data = json_util.loads(raw, json_options=json_util.JSONOptions(tz_aware=True))
        except (OSError, ValueError):
            data = []

        self._documents = list(data)


def _matches(document: Mapping[str, Any], filter: Mapping[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in filter.items())


def build_memory_collection(settings: Settings) -> InMemoryCollection:
    path = Path(settings.memory_store_path) if settings.memory_store_path else None
    return InMemoryCollection(name=settings.mongo_collection, persistence_path=path)
