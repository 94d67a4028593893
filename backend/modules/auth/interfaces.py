"""
Authentication module interface.

Other modules should depend on IAuthService, not the concrete implementation.
This enables testing with mocks and future extraction to a microservice.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import User

from .models import AuthResult


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to other modules. Implementations must provide all these methods.
    """

    async def signup(self, email: str, password: str) -> User:
        """
        Register a new user.

        Args:
            email: Email address (normalized before use)
            password: Plaintext password

        Returns:
            The created user, without password hash

        Raises:
            UserAlreadyExistsError: If the normalized email is taken
        """
        ...

    async def login(self, email: str, password: str, remember_me: bool = False) -> AuthResult:
        """
        Authenticate with email and password and start a session.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            AccountDisabledError: If the account is deactivated
        """
        ...

    async def logout(self, access_token: str) -> None:
        """
        Revoke the session of the token's user.

        Never raises; a garbage token is simply ignored.
        """
        ...

    async def validate_token(self, token: str) -> User:
        """
        Validate an access token and return the user it belongs to.

        Args:
            token: Access token from the Authorization header

        Returns:
            The user, without password hash

        Raises:
            MissingTokenError: If token is empty
            InvalidTokenError: If the signature or claims are bad
            ExpiredTokenError: If the token has expired
            UserNotFoundError: If the user no longer exists
            AccountDisabledError: If the account is deactivated
        """
        ...

    async def refresh_token(self, refresh_token: str) -> AuthResult:
        """
        Exchange a refresh token for a new token pair.

        The presented token is consumed: afterwards only the new
        refresh token is accepted.

        Raises:
            InvalidRefreshTokenError: Bad, expired or superseded token
            UserInactiveError: If the user is missing or deactivated
        """
        ...

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """
        Get a user by their ID.

        Returns:
            User if found, None otherwise
        """
        ...

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """
        Get a user by their email.

        Args:
            email: User's email address (normalized before lookup)

        Returns:
            User if found, None otherwise
        """
        ...

    async def deactivate_user(self, user_id: str) -> User:
        """
        Disable an account and revoke its session.

        Raises:
            UserNotFoundError: If the user doesn't exist
        """
        ...
