"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

One container is built per application by create_app() and kept on
``app.state``; route dependencies read it from the request, so tests can
build an app around their own container.
"""

from typing import TYPE_CHECKING, Optional

from fastapi import Depends, Request

from shared.config import Settings
from shared.store import IDocumentStore

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService
    from modules.auth.repository import SessionRepository, UserRepository
    from modules.tasks.interfaces import ITaskService
    from modules.tasks.repository import TaskRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access and cached
    within the container for the lifetime of the app.
    """

    def __init__(self, settings: Settings, store: Optional[IDocumentStore] = None) -> None:
        self.settings = settings
        self._store = store
        self._user_repository: "UserRepository | None" = None
        self._session_repository: "SessionRepository | None" = None
        self._task_repository: "TaskRepository | None" = None
        self._auth_service: "IAuthService | None" = None
        self._task_service: "ITaskService | None" = None

    @property
    def store(self) -> IDocumentStore:
        """Get the document store, connecting on first access."""
        if self._store is None:
            from modules.auth.repository import SessionRepository, UserRepository
            from shared.database import create_document_store
            self._store = create_document_store(
                self.settings,
                unique_fields={
                    UserRepository.collection: UserRepository.unique_fields,
                    SessionRepository.collection: SessionRepository.unique_fields,
                },
            )
        return self._store

    @property
    def user_repository(self) -> "UserRepository":
        if self._user_repository is None:
            from modules.auth.repository import UserRepository
            self._user_repository = UserRepository(self.store)
        return self._user_repository

    @property
    def session_repository(self) -> "SessionRepository":
        if self._session_repository is None:
            from modules.auth.repository import SessionRepository
            self._session_repository = SessionRepository(self.store)
        return self._session_repository

    @property
    def task_repository(self) -> "TaskRepository":
        if self._task_repository is None:
            from modules.tasks.repository import TaskRepository
            self._task_repository = TaskRepository(self.store)
        return self._task_repository

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(
                users=self.user_repository,
                sessions=self.session_repository,
                settings=self.settings,
            )
        return self._auth_service

    @property
    def tasks(self) -> "ITaskService":
        """Get the task service instance."""
        if self._task_service is None:
            from modules.tasks.service import TaskService
            self._task_service = TaskService(
                repository=self.task_repository,
                completed_limit_default=self.settings.completed_tasks_default_limit,
            )
        return self._task_service


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency for the application's service container."""
    return request.app.state.container


def get_auth_service(container: ServiceContainer = Depends(get_container)) -> "IAuthService":
    """FastAPI dependency for auth service."""
    return container.auth


def get_task_service(container: ServiceContainer = Depends(get_container)) -> "ITaskService":
    """FastAPI dependency for task service."""
    return container.tasks
