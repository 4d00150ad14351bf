"""Process-local record store for development and tests."""

import copy
import threading
import uuid
from typing import Dict, List, Optional

from .base import KeyedRecord, Record, RecordStore, sort_records


class InMemoryStore(RecordStore):
    """Dict-backed store; every call is atomic under one lock."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Record]] = {}
        self._next_ids: Dict[str, int] = {}
        self._lock = threading.Lock()

    def put(self, collection: str, record: Record, key: Optional[str] = None) -> str:
        key = key or uuid.uuid4().hex
        with self._lock:
            self._collections.setdefault(collection, {})[key] = copy.deepcopy(record)
        return key

    def delete(self, collection: str, key: str) -> None:
        with self._lock:
            self._collections.get(collection, {}).pop(key, None)

    def query(self, collection: str, order_by: str, descending: bool = False) -> List[KeyedRecord]:
        with self._lock:
            items = [
                (key, copy.deepcopy(record))
                for key, record in self._collections.get(collection, {}).items()
            ]
        return sort_records(items, order_by, descending)

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))

    def allocate_ids(self, collection: str, count: int) -> int:
        if count <= 0:
            raise ValueError("count must be positive")
        with self._lock:
            first = self._next_ids.get(collection, 1)
            self._next_ids[collection] = first + count
        return first
