"""
Auth repositories for database access.

Encapsulates document store access and mapping for the auth collections:
- users
- sessions (one refresh-token record per user)
"""

from datetime import datetime, timezone
from typing import Optional

from shared.repository import BaseRepository
from shared.store import utc_now_iso

from .models import Session, UserRecord


class UserRepository(BaseRepository[UserRecord]):
    """
    Repository for user records.

    Emails are expected to be normalized by the caller; lookups are exact.
    """

    collection = "users"
    model = UserRecord
    unique_fields = ("email",)

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._to_model(await self._store.find_one(self.collection, {"id": user_id}))

    async def get_by_email(self, email: str) -> Optional[UserRecord]:
        return self._to_model(await self._store.find_one(self.collection, {"email": email}))

    async def create(self, email: str, password_hash: str) -> UserRecord:
        """
        Insert a new active user.

        Raises:
            DocumentConflictError: If the email is already taken at the storage level
        """
        document = await self._store.create(
            self.collection,
            {
                "email": email,
                "password_hash": password_hash,
                "is_active": True,
                "last_login_at": None,
            },
        )
        return self.model.model_validate(document)

    async def record_login(self, user_id: str) -> UserRecord:
        document = await self._store.update(
            self.collection, user_id, {"last_login_at": utc_now_iso()}
        )
        return self.model.model_validate(document)

    async def set_active(self, user_id: str, is_active: bool) -> UserRecord:
        document = await self._store.update(self.collection, user_id, {"is_active": is_active})
        return self.model.model_validate(document)


class SessionRepository(BaseRepository[Session]):
    """
    Repository for refresh-token sessions.

    ``replace_for_user`` is the only way to create a session; a user has
    at most one.
    """

    collection = "sessions"
    model = Session
    unique_fields = ("user_id",)

    async def replace_for_user(
        self,
        user_id: str,
        refresh_token: str,
        expires_at: datetime,
    ) -> Session:
        """Store a new refresh token for the user, superseding any previous one."""
        document = await self._store.upsert(
            self.collection,
            {
                "user_id": user_id,
                "refresh_token": refresh_token,
                "expires_at": expires_at.isoformat(),
                "created_at": utc_now_iso(),
            },
            on_conflict="user_id",
        )
        return self.model.model_validate(document)

    async def find_active(self, user_id: str, refresh_token: str) -> Optional[Session]:
        """Return the user's session if it holds this exact token and has not expired."""
        session = self._to_model(
            await self._store.find_one(
                self.collection,
                {"user_id": user_id, "refresh_token": refresh_token},
            )
        )
        if session is None or session.expires_at <= datetime.now(timezone.utc):
            return None
        return session

    async def revoke_for_user(self, user_id: str) -> int:
        return await self._store.delete_many(self.collection, {"user_id": user_id})
