"""
Task repository for database access.

Every query carries the owner's user id, so a task belonging to another
user is never loaded in the first place.
"""

from typing import Any, Optional

from shared.repository import BaseRepository

from .models import Priority, Task, TaskStatus


class TaskRepository(BaseRepository[Task]):
    """Repository for the tasks collection."""

    collection = "tasks"
    model = Task

    async def get_for_user(self, user_id: str, task_id: str) -> Optional[Task]:
        document = await self._store.find_one(
            self.collection, {"id": task_id, "user_id": user_id}
        )
        return self._to_model(document)

    async def list_for_user(
        self,
        user_id: str,
        statuses: Optional[list[TaskStatus]] = None,
        priorities: Optional[list[Priority]] = None,
        order_by: str = "created_at",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[Task]:
        """
        List a user's tasks, filtered by status and priority in the store query.

        Args:
            user_id: Owner
            statuses: Allowed statuses (None for any)
            priorities: Allowed priorities (None for any)
            order_by: Stored field to order by
            descending: Order direction
            limit: Maximum number of tasks
        """
        criteria: dict[str, Any] = {"user_id": user_id}
        if statuses:
            criteria["status"] = [s.value for s in statuses]
        if priorities:
            criteria["priority"] = [p.value for p in priorities]

        documents = await self._store.find_many(
            self.collection,
            criteria,
            order_by=order_by,
            descending=descending,
            limit=limit,
        )
        return self._to_models(documents)

    async def create(self, user_id: str, fields: dict[str, Any]) -> Task:
        document = await self._store.create(
            self.collection,
            self._to_document({**fields, "user_id": user_id}),
        )
        return self.model.model_validate(document)

    async def update(self, task_id: str, fields: dict[str, Any]) -> Task:
        document = await self._store.update(self.collection, task_id, self._to_document(fields))
        return self.model.model_validate(document)
