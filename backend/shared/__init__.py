"""
Shared infrastructure for the Taskboard backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- logging_setup: Root logger configuration
- store: Document store interface and in-memory backend
- database: Supabase backend and store factory
- repository: Base repository
- exceptions: Base exception classes
- models: Shared pydantic models (User, AuthContext, response envelope)

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import SupabaseDocumentStore, create_document_store, create_supabase_client
from .exceptions import (
    TaskboardError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    RequestTimeoutError,
    ExternalServiceError,
)
from .models import AuthContext, CamelModel, SuccessResponse, User
from .store import (
    DocumentConflictError,
    DocumentNotFoundError,
    IDocumentStore,
    InMemoryDocumentStore,
)

__all__ = [
    "Settings",
    "get_settings",
    "SupabaseDocumentStore",
    "create_document_store",
    "create_supabase_client",
    "TaskboardError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "DatabaseError",
    "RequestTimeoutError",
    "ExternalServiceError",
    "AuthContext",
    "CamelModel",
    "SuccessResponse",
    "User",
    "DocumentConflictError",
    "DocumentNotFoundError",
    "IDocumentStore",
    "InMemoryDocumentStore",
]
