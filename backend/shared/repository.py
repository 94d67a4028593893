"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
document store access and the dict <-> pydantic mapping shared by them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

from .store import IDocumentStore


T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Document store access via self._store
    - The collection name and model type via class attributes
    - Mapping helpers between stored documents and models

    Subclasses should implement domain-specific data access methods.

    Example:
        class TaskRepository(BaseRepository[Task]):
            collection = "tasks"
            model = Task

            async def get(self, task_id: str) -> Optional[Task]:
                return self._to_model(await self._store.find_one(self.collection, {"id": task_id}))
    """

    collection: str
    model: type[T]

    def __init__(self, store: IDocumentStore) -> None:
        """
        Initialize the repository with a document store.

        Args:
            store: Document store instance for database operations.
        """
        self._store = store

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Map a stored document to the repository model, passing None through."""
        if document is None:
            return None
        return self.model.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        return [self.model.model_validate(d) for d in documents]

    @staticmethod
    def _to_document(data: BaseModel | dict[str, Any]) -> dict[str, Any]:
        """Serialize a model (or dict of plain values) to JSON-compatible storage form."""
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json", by_alias=False)
        return {
            key: value.model_dump(mode="json") if isinstance(value, BaseModel) else _jsonable(value)
            for key, value in data.items()
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
