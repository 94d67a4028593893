"""
Task module data models.

Stored documents use snake_case; the API exposes camelCase through
CamelModel aliases.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import Field

from shared.models import CamelModel


class Priority(str, Enum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskStatus(str, Enum):
    """Lifecycle state of a task. Deleted tasks are kept with this status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    DELETED = "deleted"


class TaskSortField(str, Enum):
    """Fields a task list can be ordered by (values as sent in ``sortBy``)."""

    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    CREATED_AT = "createdAt"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Task(CamelModel):
    """
    A task owned by a single user.

    ``completed_at`` is set exactly when ``status`` is completed.
    """

    id: str = Field(..., description="Task ID (UUID)")
    user_id: str = Field(..., description="Owner's user ID")
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Priority
    status: TaskStatus = TaskStatus.ACTIVE
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None


class TaskInput(CamelModel):
    """
    Body of task create and update requests.

    Fields are deliberately loose (plain strings, all optional) so the
    service can report every violation with its own messages. On update,
    only the fields present in the request are applied.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[str] = None


class TaskFilter(CamelModel):
    """Filter for task listing. Unset fields do not filter."""

    status: Optional[list[TaskStatus]] = None
    priority: Optional[list[Priority]] = None
    search: Optional[str] = None
    due_from: Optional[date] = None
    due_to: Optional[date] = None


class TaskSort(CamelModel):
    """Ordering for task listing."""

    field: TaskSortField
    order: SortOrder = SortOrder.ASC


class TaskStats(CamelModel):
    """Per-user task counts. Deleted tasks are not counted."""

    active: int = 0
    completed: int = 0
    overdue: int = 0
    total: int = 0


class TaskResponse(CamelModel):
    """Payload wrapping a single task."""

    task: Task


class TaskListResponse(CamelModel):
    """Payload of GET /tasks."""

    tasks: list[Task]
    stats: TaskStats
    total: int


class CompletedTasksResponse(CamelModel):
    """Payload of GET /tasks/completed."""

    tasks: list[Task]
    total: int


class TaskStatsResponse(CamelModel):
    """Payload of GET /tasks/stats."""

    stats: TaskStats
