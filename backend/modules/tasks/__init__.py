"""
Tasks module.

Handles per-user task CRUD, filtering, sorting, completion and stats.

Public API:
- ITaskService: Interface for task operations
- Task: A stored task
- TaskInput / TaskFilter / TaskSort: Inputs to the service
- TaskStats: Per-user counts
"""

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
from .exceptions import (
    NoUpdatesProvidedError,
    TaskNotFoundError,
    TaskValidationError,
)

__all__ = [
    # Interface
    "ITaskService",
    # Models
    "Priority",
    "SortOrder",
    "Task",
    "TaskFilter",
    "TaskInput",
    "TaskSort",
    "TaskSortField",
    "TaskStats",
    "TaskStatus",
    # Exceptions
    "NoUpdatesProvidedError",
    "TaskNotFoundError",
    "TaskValidationError",
]
