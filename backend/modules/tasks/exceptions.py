"""
Tasks module exceptions.
"""

from shared.exceptions import NotFoundError, ValidationError


class TaskNotFoundError(NotFoundError):
    """
    Raised when a task is missing, deleted or owned by someone else.

    The three cases are indistinguishable to the caller.
    """

    def __init__(self, task_id: str):
        super().__init__(
            "Task not found",
            code="TASK_NOT_FOUND",
            details={"task_id": task_id},
        )


class TaskValidationError(ValidationError):
    """Raised when task input fails validation. ``details`` maps field -> messages."""

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__("Validation failed", code="VALIDATION_ERROR", details=errors)
        self.errors = errors


class NoUpdatesProvidedError(ValidationError):
    """Raised when an update request carries no fields."""

    def __init__(self):
        super().__init__("No updates provided", code="NO_UPDATES_PROVIDED")
