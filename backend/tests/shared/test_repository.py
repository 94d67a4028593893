"""Tests for shared/repository.py."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

import pytest
from pydantic import BaseModel
from unittest.mock import MagicMock

from shared.repository import BaseRepository
from shared.store import InMemoryDocumentStore


class Color(str, Enum):
    RED = "red"


class Item(BaseModel):
    id: str
    name: str
    when: Optional[date] = None


class ItemRepository(BaseRepository[Item]):
    collection = "items"
    model = Item

    async def get(self, item_id: str) -> Optional[Item]:
        return self._to_model(await self._store.find_one(self.collection, {"id": item_id}))


class TestBaseRepository:
    """Tests for BaseRepository base class."""

    def test_init_stores_store(self):
        """Should keep the document store in _store."""
        store = MagicMock()
        repo = ItemRepository(store)
        assert repo._store is store

    def test_to_model_passes_none_through(self):
        assert ItemRepository(MagicMock())._to_model(None) is None

    def test_to_models(self):
        items = ItemRepository(MagicMock())._to_models([{"id": "1", "name": "a"}, {"id": "2", "name": "b"}])
        assert [i.name for i in items] == ["a", "b"]

    def test_to_document_serializes_plain_values(self):
        doc = BaseRepository._to_document(
            {
                "day": date(2024, 5, 1),
                "at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
                "color": Color.RED,
                "name": "x",
                "nothing": None,
            }
        )
        assert doc == {
            "day": "2024-05-01",
            "at": "2024-05-01T12:00:00+00:00",
            "color": "red",
            "name": "x",
            "nothing": None,
        }

    def test_to_document_from_model(self):
        doc = BaseRepository._to_document(Item(id="1", name="a", when=date(2024, 1, 2)))
        assert doc == {"id": "1", "name": "a", "when": "2024-01-02"}

    @pytest.mark.asyncio
    async def test_subclass_reads_through_store(self):
        store = InMemoryDocumentStore()
        created = await store.create("items", {"name": "a"})

        item = await ItemRepository(store).get(created["id"])

        assert isinstance(item, Item)
        assert item.name == "a"
