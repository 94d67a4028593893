"""
Authentication module.

Handles signup/login, the access/refresh token pair, refresh-token
sessions and the auth routes.

Public API:
- IAuthService: Interface for auth operations
- AuthResult: Token pair plus user returned by login/refresh
- TokenCodec / PasswordHasher: Token and password primitives
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import AuthResult, Session, TokenPayload, TokenType, UserRecord
from .passwords import PasswordHasher
from .tokens import TokenCodec
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UserNotFoundError,
    UserInactiveError,
    AccountDisabledError,
    UserAlreadyExistsError,
    RefreshTokenRequiredError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "AuthResult",
    "Session",
    "TokenPayload",
    "TokenType",
    "UserRecord",
    # Primitives
    "PasswordHasher",
    "TokenCodec",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "UserNotFoundError",
    "UserInactiveError",
    "AccountDisabledError",
    "UserAlreadyExistsError",
    "RefreshTokenRequiredError",
]
