"""
Tasks module interface.

Other modules should depend on ITaskService, not the concrete implementation.
Every operation takes the caller's user id and only ever touches that
user's tasks.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import Task, TaskFilter, TaskInput, TaskSort, TaskStats


@runtime_checkable
class ITaskService(Protocol):
    """
    Interface for task operations.

    Tasks belonging to other users behave exactly like tasks that do
    not exist.
    """

    async def create_task(self, user_id: str, data: TaskInput) -> Task:
        """
        Create an active task.

        Raises:
            TaskValidationError: If title, description or priority are invalid
        """
        ...

    async def get_tasks(
        self,
        user_id: str,
        filters: Optional[TaskFilter] = None,
        sort: Optional[TaskSort] = None,
    ) -> list[Task]:
        """
        List the user's tasks.

        Without a status filter only active tasks are returned. Without a
        sort, newest first.
        """
        ...

    async def get_task_by_id(self, user_id: str, task_id: str) -> Task:
        """
        Raises:
            TaskNotFoundError: If missing, deleted or not owned by the user
        """
        ...

    async def update_task(self, user_id: str, task_id: str, data: TaskInput) -> Task:
        """
        Apply the supplied fields to a task.

        Raises:
            NoUpdatesProvidedError: If no fields were supplied
            TaskValidationError: If a supplied field is invalid
            TaskNotFoundError: If missing, deleted or not owned by the user
        """
        ...

    async def delete_task(self, user_id: str, task_id: str) -> None:
        """
        Soft-delete a task.

        Raises:
            TaskNotFoundError: If missing, deleted or not owned by the user
        """
        ...

    async def complete_task(self, user_id: str, task_id: str) -> Task:
        """
        Mark a task completed. Completing a completed task changes nothing.

        Raises:
            TaskNotFoundError: If missing, deleted or not owned by the user
        """
        ...

    async def get_task_stats(self, user_id: str) -> TaskStats:
        """Count the user's active, completed and overdue tasks."""
        ...

    async def get_completed_tasks(self, user_id: str, limit: Optional[int] = None) -> list[Task]:
        """
        Most recently completed tasks first.

        Raises:
            TaskValidationError: If limit is outside 1..100
        """
        ...
