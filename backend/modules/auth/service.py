"""
Authentication service implementation.

Issues and validates the access/refresh token pair, stores refresh-token
sessions (one per user, rotated on every use) and manages user accounts.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from shared.config import Settings
from shared.exceptions import TaskboardError
from shared.models import User
from shared.store import DocumentConflictError

from .interfaces import IAuthService
from .models import AuthResult, TokenType, UserRecord
from .passwords import PasswordHasher
from .repository import SessionRepository, UserRepository
from .tokens import TokenCodec
from .exceptions import (
    AccountDisabledError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    MissingTokenError,
    UserAlreadyExistsError,
    UserInactiveError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Emails are compared trimmed and lowercased everywhere."""
    return email.strip().lower()


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Uses bcrypt for password hashing, HS256 JWTs for tokens and the
    document store for users and refresh-token sessions.
    """

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        settings: Settings,
        hasher: Optional[PasswordHasher] = None,
        codec: Optional[TokenCodec] = None,
    ):
        self._users = users
        self._sessions = sessions
        self._settings = settings
        self._hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)
        self._codec = codec or TokenCodec(settings)

    async def signup(self, email: str, password: str) -> User:
        """Create an active user after checking the email is free."""
        email = normalize_email(email)

        if await self._users.get_by_email(email) is not None:
            raise UserAlreadyExistsError(email)

        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        try:
            record = await self._users.create(email, password_hash)
        except DocumentConflictError:
            # Lost a race with a concurrent signup for the same email
            raise UserAlreadyExistsError(email)

        logger.info(f"Created user {record.id}")
        return record.to_public()

    async def login(self, email: str, password: str, remember_me: bool = False) -> AuthResult:
        """Verify credentials, record the login and start a fresh session."""
        record = await self._users.get_by_email(normalize_email(email))

        if record is None:
            await asyncio.to_thread(self._hasher.dummy_verify, password)
            raise InvalidCredentialsError()

        if not record.is_active:
            raise AccountDisabledError()

        if not await asyncio.to_thread(self._hasher.verify, password, record.password_hash):
            raise InvalidCredentialsError()

        record = await self._users.record_login(record.id)
        logger.info(f"User {record.id} logged in")
        return await self._start_session(record, remember_me)

    async def logout(self, access_token: str) -> None:
        """
        Revoke the session of whoever the token names.

        The token is read without verification: an expired or otherwise
        stale token must not block a client-side sign-out. Failures are
        logged and swallowed.
        """
        user_id = self._codec.peek_subject(access_token) if access_token else None
        if user_id is None:
            logger.debug("Logout with undecodable token, nothing to revoke")
            return

        try:
            revoked = await self._sessions.revoke_for_user(user_id)
        except TaskboardError as e:
            logger.warning(f"Error revoking sessions for user {user_id} on logout: {e.message}")
            return

        logger.info(f"User {user_id} logged out ({revoked} session(s) revoked)")

    async def validate_token(self, token: str) -> User:
        """Verify an access token and load its user."""
        if not token:
            raise MissingTokenError()

        payload = self._codec.decode(token, TokenType.ACCESS)

        record = await self._users.get_by_id(payload.sub)
        if record is None:
            raise UserNotFoundError(payload.sub)
        if not record.is_active:
            raise AccountDisabledError()

        return record.to_public()

    async def refresh_token(self, refresh_token: str) -> AuthResult:
        """Consume a refresh token and issue a new pair."""
        if not refresh_token:
            raise InvalidRefreshTokenError()

        try:
            payload = self._codec.decode(refresh_token, TokenType.REFRESH)
        except (InvalidTokenError, ExpiredTokenError):
            raise InvalidRefreshTokenError()

        session = await self._sessions.find_active(payload.sub, refresh_token)
        if session is None:
            logger.warning(f"Refresh with superseded or unknown token for user {payload.sub}")
            raise InvalidRefreshTokenError()

        record = await self._users.get_by_id(payload.sub)
        if record is None or not record.is_active:
            raise UserInactiveError()

        return await self._start_session(record, payload.remember_me)

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        record = await self._users.get_by_id(user_id)
        return record.to_public() if record else None

    async def get_user_by_email(self, email: str) -> Optional[User]:
        record = await self._users.get_by_email(normalize_email(email))
        return record.to_public() if record else None

    async def deactivate_user(self, user_id: str) -> User:
        """Disable the account; existing access tokens stop validating immediately."""
        if await self._users.get_by_id(user_id) is None:
            raise UserNotFoundError(user_id)

        record = await self._users.set_active(user_id, False)
        await self._sessions.revoke_for_user(user_id)
        logger.info(f"Deactivated user {user_id}")
        return record.to_public()

    async def _start_session(self, record: UserRecord, remember_me: bool) -> AuthResult:
        """Mint a token pair and make its refresh token the user's only session."""
        access_token = self._codec.create_access_token(record.id, record.email)
        refresh_token = self._codec.create_refresh_token(record.id, remember_me)

        expires_at = datetime.now(timezone.utc) + timedelta(
            seconds=self._codec.refresh_ttl(remember_me)
        )
        await self._sessions.replace_for_user(record.id, refresh_token, expires_at)

        return AuthResult(
            user=record.to_public(),
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._codec.access_ttl,
        )
