"""Storage backends for memory records."""

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from .models import MemoryRecord


class MemoryStore(ABC):
    """Interface for memory record storage.

    Implementations own the record collection. Records are immutable,
    so everything handed out is safe to keep.
    """

    @abstractmethod
    def create(self, description: str, content: str) -> MemoryRecord:
        """Create a record and return it with its assigned id."""
        ...

    @abstractmethod
    def get(self, record_id: str) -> MemoryRecord | None:
        """Get a record by id, None if missing."""
        ...

    @abstractmethod
    def get_all(self) -> list[MemoryRecord]:
        """Get all records in insertion order."""
        ...

    @abstractmethod
    def update(
        self,
        record_id: str,
        description: str | None = None,
        content: str | None = None,
    ) -> MemoryRecord | None:
        """Update the given fields of a record, None if missing."""
        ...

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Delete a record. Returns True if it existed."""
        ...

    @abstractmethod
    def search(self, query: str) -> list[MemoryRecord]:
        """Case-insensitive substring search over description and content."""
        ...


class InMemoryStore(MemoryStore):
    """Volatile store keyed by id, iterating in insertion order.

    All operations take a lock, so one instance can be shared between
    threads as well as between asyncio tasks.
    """

    def __init__(self) -> None:
        self._items: dict[str, MemoryRecord] = {}
        self._lock = threading.Lock()

    def create(self, description: str, content: str) -> MemoryRecord:
        now = _utcnow()
        with self._lock:
            record_id = self._generate_id()
            record = MemoryRecord(
                id=record_id,
                description=description,
                content=content,
                created_at=now,
                updated_at=now,
            )
            self._items[record_id] = record
        return record

    def get(self, record_id: str) -> MemoryRecord | None:
        with self._lock:
            return self._items.get(record_id)

    def get_all(self) -> list[MemoryRecord]:
        with self._lock:
            return list(self._items.values())

    def update(
        self,
        record_id: str,
        description: str | None = None,
        content: str | None = None,
    ) -> MemoryRecord | None:
        with self._lock:
            record = self._items.get(record_id)
            if record is None:
                return None

            changes: dict[str, object] = {}
            if description is not None:
                changes["description"] = description
            if content is not None:
                changes["content"] = content

            # updated_at must move forward even within one clock tick
            now = _utcnow()
            if now <= record.updated_at:
                now = record.updated_at + timedelta(microseconds=1)

            updated = replace(record, updated_at=now, **changes)
            self._items[record_id] = updated
            return updated

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._items.pop(record_id, None) is not None

    def search(self, query: str) -> list[MemoryRecord]:
        needle = query.lower()
        with self._lock:
            records = list(self._items.values())
        return [
            record
            for record in records
            if needle in record.description.lower() or needle in record.content.lower()
        ]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _generate_id(self) -> str:
        record_id = uuid.uuid4().hex
        while record_id in self._items:
            record_id = uuid.uuid4().hex
        return record_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
