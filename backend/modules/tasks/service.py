"""
Task service implementation.

All operations are scoped by the caller's user id. Deleting a task sets its
status to deleted; such tasks only show up when listing with an explicit
``status=deleted`` filter.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from .interfaces import ITaskService
from .models import (
    Priority,
    SortOrder,
    Task,
    TaskFilter,
    TaskInput,
    TaskSort,
    TaskSortField,
    TaskStats,
    TaskStatus,
)
from .repository import TaskRepository
from .exceptions import NoUpdatesProvidedError, TaskNotFoundError, TaskValidationError

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_COMPLETED_LIMIT = 100
MAX_SEARCH_LENGTH = 100

PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}

_PRIORITY_VALUES = [p.value for p in Priority]


def validate_task_input(data: TaskInput, partial: bool = False) -> dict[str, list[str]]:
    """
    Check task input and collect messages per field.

    With ``partial`` (updates) only the supplied fields are checked;
    otherwise title and priority are required.
    """
    errors: dict[str, list[str]] = {}
    supplied = data.model_fields_set

    if not partial or "title" in supplied:
        if not data.title:
            errors["title"] = ["Title is required"]
        elif not data.title.strip():
            errors["title"] = ["Title cannot be empty"]
        elif len(data.title.strip()) > MAX_TITLE_LENGTH:
            errors["title"] = [f"Title must be {MAX_TITLE_LENGTH} characters or less"]

    if data.description and len(data.description) > MAX_DESCRIPTION_LENGTH:
        errors["description"] = [f"Description must be {MAX_DESCRIPTION_LENGTH} characters or less"]

    if not partial or "priority" in supplied:
        if data.priority not in _PRIORITY_VALUES:
            errors["priority"] = ["Priority must be one of: low, medium, high"]

    return errors


def _sort_key(field: TaskSortField) -> Callable[[Task], Any]:
    if field is TaskSortField.DUE_DATE:
        # Tasks without a due date sort as if due at +infinity.
        return lambda t: (t.due_date is None, t.due_date or date.min)
    if field is TaskSortField.PRIORITY:
        return lambda t: PRIORITY_RANK[t.priority]
    if field is TaskSortField.TITLE:
        return lambda t: t.title.lower()
    return lambda t: t.created_at


def sort_tasks(tasks: list[Task], sort: TaskSort) -> list[Task]:
    """Stable sort: tasks with equal keys keep their relative order."""
    return sorted(tasks, key=_sort_key(sort.field), reverse=sort.order is SortOrder.DESC)


def _matches_search(task: Task, search: str) -> bool:
    needle = search.lower()
    if needle in task.title.lower():
        return True
    return bool(task.description) and needle in task.description.lower()


def _in_due_range(task: Task, due_from: Optional[date], due_to: Optional[date]) -> bool:
    if task.due_date is None:
        return False
    if due_from and task.due_date < due_from:
        return False
    if due_to and task.due_date > due_to:
        return False
    return True


class TaskService(ITaskService):
    """Implementation of the task service on top of TaskRepository."""

    def __init__(self, repository: TaskRepository, completed_limit_default: int = 50):
        self._repo = repository
        self._completed_limit_default = completed_limit_default

    async def create_task(self, user_id: str, data: TaskInput) -> Task:
        errors = validate_task_input(data)
        if errors:
            raise TaskValidationError(errors)

        task = await self._repo.create(
            user_id,
            {
                "title": data.title.strip(),
                "description": (data.description or "").strip() or None,
                "due_date": data.due_date,
                "priority": data.priority,
                "status": TaskStatus.ACTIVE,
                "completed_at": None,
            },
        )
        logger.info(f"User {user_id} created task {task.id}")
        return task

    async def get_tasks(
        self,
        user_id: str,
        filters: Optional[TaskFilter] = None,
        sort: Optional[TaskSort] = None,
    ) -> list[Task]:
        filters = filters or TaskFilter()
        search = (filters.search or "").strip()
        if len(search) > MAX_SEARCH_LENGTH:
            raise TaskValidationError(
                {"search": [f"Search must be {MAX_SEARCH_LENGTH} characters or less"]}
            )

        tasks = await self._repo.list_for_user(
            user_id,
            statuses=filters.status or [TaskStatus.ACTIVE],
            priorities=filters.priority,
        )

        # Search and due range run on the already user-scoped result.
        if search:
            tasks = [t for t in tasks if _matches_search(t, search)]
        if filters.due_from or filters.due_to:
            tasks = [t for t in tasks if _in_due_range(t, filters.due_from, filters.due_to)]

        if sort:
            tasks = sort_tasks(tasks, sort)
        return tasks

    async def get_task_by_id(self, user_id: str, task_id: str) -> Task:
        task = await self._repo.get_for_user(user_id, task_id)
        if task is None or task.status is TaskStatus.DELETED:
            raise TaskNotFoundError(task_id)
        return task

    async def update_task(self, user_id: str, task_id: str, data: TaskInput) -> Task:
        supplied = data.model_fields_set
        if not supplied:
            raise NoUpdatesProvidedError()

        errors = validate_task_input(data, partial=True)
        if errors:
            raise TaskValidationError(errors)

        await self.get_task_by_id(user_id, task_id)

        updates: dict[str, Any] = {}
        if "title" in supplied:
            updates["title"] = data.title.strip()
        if "description" in supplied:
            updates["description"] = (data.description or "").strip() or None
        if "due_date" in supplied:
            updates["due_date"] = data.due_date
        if "priority" in supplied:
            updates["priority"] = data.priority

        task = await self._repo.update(task_id, updates)
        logger.info(f"User {user_id} updated task {task_id} ({', '.join(sorted(updates))})")
        return task

    async def delete_task(self, user_id: str, task_id: str) -> None:
        await self.get_task_by_id(user_id, task_id)
        await self._repo.update(task_id, {"status": TaskStatus.DELETED, "completed_at": None})
        logger.info(f"User {user_id} deleted task {task_id}")

    async def complete_task(self, user_id: str, task_id: str) -> Task:
        task = await self.get_task_by_id(user_id, task_id)
        if task.status is TaskStatus.COMPLETED:
            return task

        return await self._repo.update(
            task_id,
            {"status": TaskStatus.COMPLETED, "completed_at": datetime.now(timezone.utc)},
        )

    async def get_task_stats(self, user_id: str) -> TaskStats:
        tasks = await self._repo.list_for_user(
            user_id, statuses=[TaskStatus.ACTIVE, TaskStatus.COMPLETED]
        )
        today = datetime.now(timezone.utc).date()

        stats = TaskStats()
        for task in tasks:
            if task.status is TaskStatus.COMPLETED:
                stats.completed += 1
                continue
            stats.active += 1
            if task.due_date is not None and task.due_date < today:
                stats.overdue += 1
        stats.total = stats.active + stats.completed
        return stats

    async def get_completed_tasks(self, user_id: str, limit: Optional[int] = None) -> list[Task]:
        if limit is None:
            limit = self._completed_limit_default
        if not 1 <= limit <= MAX_COMPLETED_LIMIT:
            raise TaskValidationError(
                {"limit": [f"Limit must be between 1 and {MAX_COMPLETED_LIMIT}"]}
            )

        return await self._repo.list_for_user(
            user_id,
            statuses=[TaskStatus.COMPLETED],
            order_by="completed_at",
            descending=True,
            limit=limit,
        )
