"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Access token is required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidCredentialsError(AuthenticationError):
    """
    Raised for an unknown email or a wrong password.

    Both cases share this error and message so callers cannot tell
    which accounts exist.
    """

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class InvalidRefreshTokenError(AuthenticationError):
    """Raised when a refresh token fails verification or no longer has a session."""

    def __init__(self):
        super().__init__("Invalid refresh token", code="INVALID_REFRESH_TOKEN")


class UserNotFoundError(AuthenticationError):
    """Raised when the authenticated user doesn't exist in the database."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class UserInactiveError(AuthenticationError):
    """Raised on refresh when the user is missing or deactivated."""

    def __init__(self):
        super().__init__("User not found or inactive", code="USER_INACTIVE")


class AccountDisabledError(AuthorizationError):
    """Raised when a deactivated account logs in or presents a token."""

    def __init__(self):
        super().__init__("Account is disabled", code="ACCOUNT_DISABLED")


class UserAlreadyExistsError(ConflictError):
    """Raised on signup with an email that is already registered."""

    def __init__(self, email: str):
        super().__init__(
            "User with this email already exists",
            code="USER_ALREADY_EXISTS",
            details={"email": email},
        )


class RefreshTokenRequiredError(ValidationError):
    """Raised when POST /auth/refresh is called without a refresh token."""

    def __init__(self):
        super().__init__("Refresh token is required", code="REFRESH_TOKEN_REQUIRED")
