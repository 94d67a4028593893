"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, EmailStr

from shared.models import CamelModel, User


class TokenType(str, Enum):
    """Kind of signed token; each kind has its own secret and lifetime."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenPayload(BaseModel):
    """
    Decoded JWT claims for both token kinds.

    ``jti`` makes every minted token unique, even two minted for the
    same user within the same second.
    """

    sub: str = Field(..., description="Subject (user ID)")
    type: TokenType = Field(..., description="Token kind")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    jti: str = Field(..., description="Unique token ID")
    email: Optional[str] = Field(None, description="User's email (access tokens only)")
    remember_me: bool = Field(default=False, description="Long-lived refresh window (refresh tokens only)")
    iss: Optional[str] = None
    aud: Optional[str] = None


class UserRecord(User):
    """Stored user document, including the password hash."""

    password_hash: str = Field(..., repr=False)

    def to_public(self) -> User:
        """Strip the password hash."""
        return User.model_validate(self.model_dump(exclude={"password_hash"}))


class Session(BaseModel):
    """
    Stored refresh-token record.

    At most one exists per user; creating a new one replaces the old one.
    """

    id: str
    user_id: str
    refresh_token: str = Field(..., repr=False)
    expires_at: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None


class AuthResult(CamelModel):
    """Result of signup+login, login and refresh. Never persisted."""

    user: User
    access_token: str
    refresh_token: str
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class SignupRequest(CamelModel):
    """Body of POST /auth/signup."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class LoginRequest(CamelModel):
    """Body of POST /auth/login."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    remember_me: bool = False


class RefreshRequest(CamelModel):
    """Body of POST /auth/refresh."""

    refresh_token: Optional[str] = None


class ProfileResponse(CamelModel):
    """Payload of GET /auth/profile."""

    user: User


class TokenValidationResponse(CamelModel):
    """Payload of GET /auth/validate."""

    valid: bool = Field(..., description="Whether the token is valid")
    user: Optional[User] = Field(None, description="User if valid")
