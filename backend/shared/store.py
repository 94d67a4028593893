"""
Document store abstraction.

Services and repositories talk to storage only through IDocumentStore:
a handful of collection-level primitives over JSON-compatible dicts.
Two implementations exist:

- SupabaseDocumentStore (shared/database.py): production, one table per collection
- InMemoryDocumentStore (this module): tests and local development

Criteria semantics are shared by both implementations:
- ``{"field": value}`` matches documents whose field equals value
- ``{"field": [a, b]}`` matches documents whose field is one of the values
- ``{"field": None}`` matches documents whose field is null or missing
"""

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, runtime_checkable

from .exceptions import ConflictError, NotFoundError

Document = dict[str, Any]
Criteria = dict[str, Any]


class DocumentNotFoundError(NotFoundError):
    """Raised when an update or delete targets a missing document."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(
            f"Document not found: {collection}/{doc_id}",
            code="DOCUMENT_NOT_FOUND",
            details={"collection": collection, "id": doc_id},
        )


class DocumentConflictError(ConflictError):
    """Raised when a write violates a unique field."""

    def __init__(self, collection: str, field: Optional[str] = None):
        super().__init__(
            f"Duplicate value in {collection}" + (f".{field}" if field else ""),
            code="DOCUMENT_CONFLICT",
            details={"collection": collection, "field": field},
        )


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string, the stored timestamp format."""
    return datetime.now(timezone.utc).isoformat()


@runtime_checkable
class IDocumentStore(Protocol):
    """
    Interface for document storage.

    All methods are coroutines so that handlers suspend on storage I/O.
    Returned documents are copies; mutating them never changes stored state.
    """

    async def find_one(self, collection: str, criteria: Criteria) -> Optional[Document]:
        """Return the first document matching criteria, or None."""
        ...

    async def find_many(
        self,
        collection: str,
        criteria: Optional[Criteria] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        """Return all documents matching criteria, optionally ordered and limited."""
        ...

    async def create(self, collection: str, data: Document) -> Document:
        """
        Insert a document.

        Assigns ``id`` (unless given), ``created_at`` and ``updated_at``.

        Raises:
            DocumentConflictError: If a unique field is already taken
        """
        ...

    async def update(self, collection: str, doc_id: str, updates: Document) -> Document:
        """
        Apply a partial update and refresh ``updated_at``.

        Raises:
            DocumentNotFoundError: If no document has that id
        """
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """
        Remove a document.

        Raises:
            DocumentNotFoundError: If no document has that id
        """
        ...

    async def delete_many(self, collection: str, criteria: Criteria) -> int:
        """Remove every document matching criteria and return how many were removed."""
        ...

    async def upsert(self, collection: str, data: Document, on_conflict: str) -> Document:
        """
        Insert a document, or replace the one sharing the ``on_conflict`` field value.

        This is a single write: there is never a moment where neither
        the old nor the new document exists.
        """
        ...


def matches(document: Document, criteria: Criteria) -> bool:
    """Check a document against criteria using the shared semantics."""
    for field, expected in criteria.items():
        actual = document.get(field)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryDocumentStore:
    """
    Process-local IDocumentStore backed by dictionaries.

    Unique fields emulate the unique indexes created by the SQL migrations,
    so conflict behaviour matches the Supabase store.
    """

    def __init__(self, unique_fields: Optional[dict[str, tuple[str, ...]]] = None) -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._unique_fields = unique_fields or {}
        self._lock = threading.RLock()

    def _collection(self, name: str) -> dict[str, Document]:
        return self._collections.setdefault(name, {})

    def _check_unique(self, collection: str, document: Document, exclude_id: Optional[str] = None) -> None:
        for field in self._unique_fields.get(collection, ()):
            value = document.get(field)
            if value is None:
                continue
            for existing in self._collection(collection).values():
                if existing["id"] != exclude_id and existing.get(field) == value:
                    raise DocumentConflictError(collection, field)

    async def find_one(self, collection: str, criteria: Criteria) -> Optional[Document]:
        with self._lock:
            for document in self._collection(collection).values():
                if matches(document, criteria):
                    return copy.deepcopy(document)
        return None

    async def find_many(
        self,
        collection: str,
        criteria: Optional[Criteria] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        with self._lock:
            found = [
                copy.deepcopy(document)
                for document in self._collection(collection).values()
                if matches(document, criteria or {})
            ]

        if order_by:
            # Nulls last in both directions, like Postgres' default for DESC NULLS LAST.
            present = [d for d in found if d.get(order_by) is not None]
            missing = [d for d in found if d.get(order_by) is None]
            present.sort(key=lambda d: d[order_by], reverse=descending)
            found = present + missing

        if limit is not None:
            found = found[:limit]
        return found

    async def create(self, collection: str, data: Document) -> Document:
        now = utc_now_iso()
        document = {**copy.deepcopy(data), "created_at": now, "updated_at": now}
        document.setdefault("id", str(uuid.uuid4()))

        with self._lock:
            self._check_unique(collection, document)
            self._collection(collection)[document["id"]] = document
            return copy.deepcopy(document)

    async def update(self, collection: str, doc_id: str, updates: Document) -> Document:
        with self._lock:
            existing = self._collection(collection).get(doc_id)
            if existing is None:
                raise DocumentNotFoundError(collection, doc_id)

            updated = {**existing, **copy.deepcopy(updates), "id": doc_id, "updated_at": utc_now_iso()}
            self._check_unique(collection, updated, exclude_id=doc_id)
            self._collection(collection)[doc_id] = updated
            return copy.deepcopy(updated)

    async def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            if self._collection(collection).pop(doc_id, None) is None:
                raise DocumentNotFoundError(collection, doc_id)

    async def delete_many(self, collection: str, criteria: Criteria) -> int:
        with self._lock:
            documents = self._collection(collection)
            doomed = [doc_id for doc_id, doc in documents.items() if matches(doc, criteria)]
            for doc_id in doomed:
                del documents[doc_id]
            return len(doomed)

    async def upsert(self, collection: str, data: Document, on_conflict: str) -> Document:
        now = utc_now_iso()
        with self._lock:
            documents = self._collection(collection)
            key = data[on_conflict]
            existing = next(
                (doc for doc in documents.values() if doc.get(on_conflict) == key),
                None,
            )

            document = {"created_at": now, **copy.deepcopy(data), "updated_at": now}
            document["id"] = existing["id"] if existing else data.get("id", str(uuid.uuid4()))
            self._check_unique(collection, document, exclude_id=document["id"])
            documents[document["id"]] = document
            return copy.deepcopy(document)
