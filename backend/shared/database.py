"""
Document store backends.

Provides the Supabase client factory and the Supabase implementation of
IDocumentStore, plus a factory that picks the backend from settings.
"""

import asyncio
import logging
import uuid
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from .config import Settings
from .exceptions import DatabaseError, ExternalServiceError
from .store import (
    Criteria,
    Document,
    DocumentConflictError,
    DocumentNotFoundError,
    IDocumentStore,
    InMemoryDocumentStore,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"
# invalid_text_representation, e.g. a non-UUID value for a uuid column
INVALID_TEXT_REPRESENTATION = "22P02"


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role key (bypasses RLS).

    Ownership checks are done by the service layer, so the backend
    always talks to Supabase with full access.

    Raises:
        RuntimeError: If the Supabase settings are missing
    """
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
        )
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


class SupabaseDocumentStore:
    """
    IDocumentStore backed by Supabase tables (one table per collection).

    The supabase-py client is synchronous, so every query runs in a worker
    thread. Storage failures are wrapped in DatabaseError, unreachable hosts in
    ExternalServiceError, and unique violations become DocumentConflictError.
    """

    def __init__(self, client: Client) -> None:
        self._db = client

    async def _execute(self, query: Any, collection: str, operation: str) -> Any:
        """
        Run a query in a worker thread.

        Returns None for a ``find`` whose key cannot be parsed by Postgres
        (for example a non-UUID id), since no row can match it.
        """
        try:
            return await asyncio.to_thread(query.execute)
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DocumentConflictError(collection) from e
            if e.code == INVALID_TEXT_REPRESENTATION and operation == "find":
                logger.debug(f"Malformed key in {collection} lookup: {e.message}")
                return None
            logger.error(f"Supabase {operation} on {collection} failed: {e.message}")
            raise DatabaseError(
                f"Failed to {operation} {collection}",
                code=f"DB_{operation.upper()}_FAILED",
                details={"collection": collection},
            ) from e
        except httpx.TransportError as e:
            logger.error(f"Supabase {operation} on {collection} unreachable: {e}")
            raise ExternalServiceError(
                "Database is unreachable",
                service="supabase",
                code="DATABASE_UNREACHABLE",
                details={"collection": collection},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {operation} on {collection} failed: {e}")
            raise DatabaseError(
                f"Failed to {operation} {collection}",
                code=f"DB_{operation.upper()}_FAILED",
                details={"collection": collection},
            ) from e

    @staticmethod
    def _apply_criteria(query: Any, criteria: Optional[Criteria]) -> Any:
        for field, value in (criteria or {}).items():
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.in_(field, list(value))
            elif value is None:
                query = query.is_(field, "null")
            else:
                query = query.eq(field, value)
        return query

    async def find_one(self, collection: str, criteria: Criteria) -> Optional[Document]:
        query = self._apply_criteria(self._db.table(collection).select("*"), criteria)
        result = await self._execute(query.limit(1), collection, "find")
        if result is None or not result.data:
            return None
        return result.data[0]

    async def find_many(
        self,
        collection: str,
        criteria: Optional[Criteria] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Document]:
        query = self._apply_criteria(self._db.table(collection).select("*"), criteria)
        if order_by:
            query = query.order(order_by, desc=descending, nullsfirst=False)
        if limit is not None:
            query = query.limit(limit)
        result = await self._execute(query, collection, "find")
        if result is None:
            return []
        return list(result.data or [])

    async def create(self, collection: str, data: Document) -> Document:
        now = utc_now_iso()
        document = {"id": str(uuid.uuid4()), **data, "created_at": now, "updated_at": now}
        result = await self._execute(
            self._db.table(collection).insert(document), collection, "create"
        )
        if not result.data:
            raise DatabaseError(f"Insert into {collection} returned no rows")
        return result.data[0]

    async def update(self, collection: str, doc_id: str, updates: Document) -> Document:
        data = {**updates, "updated_at": utc_now_iso()}
        result = await self._execute(
            self._db.table(collection).update(data).eq("id", doc_id), collection, "update"
        )
        if not result.data:
            raise DocumentNotFoundError(collection, doc_id)
        return result.data[0]

    async def delete(self, collection: str, doc_id: str) -> None:
        result = await self._execute(
            self._db.table(collection).delete().eq("id", doc_id), collection, "delete"
        )
        if not result.data:
            raise DocumentNotFoundError(collection, doc_id)

    async def delete_many(self, collection: str, criteria: Criteria) -> int:
        query = self._apply_criteria(self._db.table(collection).delete(), criteria)
        result = await self._execute(query, collection, "delete")
        return len(result.data or [])

    async def upsert(self, collection: str, data: Document, on_conflict: str) -> Document:
        now = utc_now_iso()
        document = {"created_at": now, **data, "updated_at": now}
        result = await self._execute(
            self._db.table(collection).upsert(document, on_conflict=on_conflict),
            collection,
            "upsert",
        )
        if not result.data:
            raise DatabaseError(f"Upsert into {collection} returned no rows")
        return result.data[0]


def create_document_store(
    settings: Settings,
    unique_fields: Optional[dict[str, tuple[str, ...]]] = None,
) -> IDocumentStore:
    """
    Build the document store selected by ``settings.database_backend``.

    Args:
        settings: Application settings
        unique_fields: Unique fields per collection for the in-memory backend
            (the Supabase backend gets them from the SQL migrations)
    """
    if settings.database_backend == "memory":
        logger.warning("Using in-memory document store; data is lost on restart")
        return InMemoryDocumentStore(unique_fields=unique_fields)
    return SupabaseDocumentStore(create_supabase_client(settings))
