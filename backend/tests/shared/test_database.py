"""Tests for shared/database.py."""

import pytest
import httpx
from unittest.mock import patch, MagicMock
from postgrest.exceptions import APIError

from shared.config import Settings
from shared.database import (
    SupabaseDocumentStore,
    create_document_store,
    create_supabase_client,
)
from shared.exceptions import DatabaseError, ExternalServiceError
from shared.store import DocumentConflictError, DocumentNotFoundError, InMemoryDocumentStore


def make_query(data=None) -> MagicMock:
    """A chainable postgrest query mock whose execute() returns ``data``."""
    query = MagicMock()
    for method in ("select", "insert", "update", "delete", "upsert", "eq", "in_", "is_", "order", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data)
    return query


def make_store(query: MagicMock) -> tuple[SupabaseDocumentStore, MagicMock]:
    client = MagicMock()
    client.table.return_value = query
    return SupabaseDocumentStore(client), client


class TestSupabaseClient:
    @patch("shared.database.create_client")
    def test_creates_client_with_service_role_key(self, mock_create):
        """Should create client with service role key."""
        settings = Settings(
            _env_file=None,
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="test-key",
        )
        mock_create.return_value = MagicMock()

        client = create_supabase_client(settings)

        mock_create.assert_called_once_with("https://test.supabase.co", "test-key")
        assert client is mock_create.return_value

    def test_missing_configuration_raises(self):
        with pytest.raises(RuntimeError, match="Supabase configuration missing"):
            create_supabase_client(Settings(_env_file=None, supabase_url="", supabase_service_role_key=""))


class TestCreateDocumentStore:
    def test_memory_backend(self):
        store = create_document_store(
            Settings(_env_file=None, database_backend="memory"),
            unique_fields={"users": ("email",)},
        )
        assert isinstance(store, InMemoryDocumentStore)

    @patch("shared.database.create_client")
    def test_supabase_backend(self, mock_create):
        settings = Settings(
            _env_file=None,
            database_backend="supabase",
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="test-key",
        )
        store = create_document_store(settings)
        assert isinstance(store, SupabaseDocumentStore)


class TestSupabaseDocumentStore:
    @pytest.mark.asyncio
    async def test_find_one_applies_criteria(self):
        query = make_query([{"id": "t1"}])
        store, client = make_store(query)

        doc = await store.find_one("tasks", {"user_id": "u1", "status": ["active", "completed"], "completed_at": None})

        assert doc == {"id": "t1"}
        client.table.assert_called_with("tasks")
        query.eq.assert_called_once_with("user_id", "u1")
        query.in_.assert_called_once_with("status", ["active", "completed"])
        query.is_.assert_called_once_with("completed_at", "null")
        query.limit.assert_called_once_with(1)

    @pytest.mark.asyncio
    async def test_find_one_no_rows(self):
        store, _ = make_store(make_query([]))
        assert await store.find_one("tasks", {"id": "missing"}) is None

    @pytest.mark.asyncio
    async def test_find_many_orders_with_nulls_last(self):
        query = make_query([{"id": "a"}, {"id": "b"}])
        store, _ = make_store(query)

        docs = await store.find_many("tasks", {"user_id": "u1"}, order_by="created_at", descending=True, limit=10)

        assert [d["id"] for d in docs] == ["a", "b"]
        query.order.assert_called_once_with("created_at", desc=True, nullsfirst=False)
        query.limit.assert_called_once_with(10)

    @pytest.mark.asyncio
    async def test_create_sets_id_and_timestamps(self):
        query = make_query([{"id": "new"}])
        store, _ = make_store(query)

        await store.create("tasks", {"title": "Write tests"})

        inserted = query.insert.call_args.args[0]
        assert inserted["title"] == "Write tests"
        assert inserted["id"]
        assert inserted["created_at"] == inserted["updated_at"]

    @pytest.mark.asyncio
    async def test_update_missing_row_raises_not_found(self):
        store, _ = make_store(make_query([]))
        with pytest.raises(DocumentNotFoundError):
            await store.update("tasks", "missing", {"title": "x"})

    @pytest.mark.asyncio
    async def test_upsert_passes_conflict_column(self):
        query = make_query([{"id": "s1", "user_id": "u1"}])
        store, _ = make_store(query)

        doc = await store.upsert("sessions", {"user_id": "u1", "refresh_token": "r"}, on_conflict="user_id")

        assert doc["id"] == "s1"
        assert query.upsert.call_args.kwargs == {"on_conflict": "user_id"}

    @pytest.mark.asyncio
    async def test_delete_many_counts_deleted_rows(self):
        store, _ = make_store(make_query([{"id": "a"}, {"id": "b"}]))
        assert await store.delete_many("sessions", {"user_id": "u1"}) == 2

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_conflict(self):
        query = make_query()
        query.execute.side_effect = APIError({"message": "duplicate key", "code": "23505"})
        store, _ = make_store(query)

        with pytest.raises(DocumentConflictError):
            await store.create("users", {"email": "a@example.com"})

    @pytest.mark.asyncio
    async def test_api_error_becomes_database_error(self):
        query = make_query()
        query.execute.side_effect = APIError({"message": "syntax error", "code": "42601"})
        store, _ = make_store(query)

        with pytest.raises(DatabaseError) as exc_info:
            await store.find_many("tasks", {"user_id": "u1"})
        assert exc_info.value.code == "DB_FIND_FAILED"

    @pytest.mark.asyncio
    async def test_unreachable_host_becomes_external_service_error(self):
        query = make_query()
        query.execute.side_effect = httpx.ConnectError("connection refused")
        store, _ = make_store(query)

        with pytest.raises(ExternalServiceError) as exc_info:
            await store.find_one("tasks", {"id": "t1"})
        assert exc_info.value.code == "DATABASE_UNREACHABLE"
        assert exc_info.value.service == "supabase"

    @pytest.mark.asyncio
    async def test_malformed_id_finds_nothing(self):
        query = make_query()
        query.execute.side_effect = APIError(
            {"message": "invalid input syntax for type uuid: \"abc\"", "code": "22P02"}
        )
        store, _ = make_store(query)

        assert await store.find_one("tasks", {"id": "abc", "user_id": "u1"}) is None
        assert await store.find_many("tasks", {"id": "abc"}) == []

    @pytest.mark.asyncio
    async def test_malformed_id_on_update_is_database_error(self):
        query = make_query()
        query.execute.side_effect = APIError({"message": "invalid input syntax", "code": "22P02"})
        store, _ = make_store(query)

        with pytest.raises(DatabaseError):
            await store.update("tasks", "abc", {"title": "x"})
