"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Base model for anything that crosses the HTTP boundary.

    Serializes to camelCase (``dueDate``, ``accessToken``) while accepting
    both camelCase and snake_case on input, so stored snake_case documents
    validate directly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class User(CamelModel):
    """
    Public view of a user account.

    Never carries the password hash; the auth module keeps that in
    its own UserRecord model.
    """

    id: str = Field(..., description="User ID (UUID)")
    email: EmailStr = Field(..., description="Normalized (lowercase, trimmed) email")
    is_active: bool = Field(default=True, description="False once the account is deactivated")
    created_at: datetime = Field(..., description="Account creation time")
    updated_at: datetime = Field(..., description="Last update time")
    last_login_at: Optional[datetime] = Field(None, description="Last successful login")


class AuthContext(BaseModel):
    """
    The authenticated caller of a request.

    Built by the auth dependency from a validated access token and passed
    explicitly into route handlers and, as ``user_id``, into services.
    """

    user: User
    access_token: str = Field(..., repr=False)

    model_config = {"frozen": True}  # Make immutable for safety

    @property
    def user_id(self) -> str:
        return self.user.id


class SuccessResponse(CamelModel, Generic[T]):
    """Standard success envelope: ``{success, message?, data?}``."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
