"""
Signing and verification of access and refresh tokens.

Both kinds are HS256 JWTs carrying the user id (``sub``), issue time and a
unique ``jti``. They use independent secrets and lifetimes, and carry a
``type`` claim so one kind is never accepted in place of the other.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings

from .exceptions import ExpiredTokenError, InvalidTokenError
from .models import TokenPayload, TokenType

ALGORITHM = "HS256"


class TokenCodec:
    """Mints and verifies tokens using the JWT settings."""

    def __init__(self, settings: Settings):
        if not settings.jwt_secret or not settings.jwt_refresh_secret:
            raise RuntimeError(
                "JWT secrets not configured. "
                "Set JWT_SECRET and JWT_REFRESH_SECRET environment variables."
            )
        self._settings = settings

    @property
    def access_ttl(self) -> int:
        return self._settings.access_token_ttl_seconds

    def refresh_ttl(self, remember_me: bool = False) -> int:
        if remember_me:
            return self._settings.remember_me_refresh_ttl_seconds
        return self._settings.refresh_token_ttl_seconds

    def _secret(self, token_type: TokenType) -> str:
        if token_type is TokenType.ACCESS:
            return self._settings.jwt_secret
        return self._settings.jwt_refresh_secret

    def _encode(self, token_type: TokenType, user_id: str, ttl: int, **claims) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "type": token_type.value,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=ttl)).timestamp()),
            "jti": uuid.uuid4().hex,
            "iss": self._settings.jwt_issuer,
            "aud": self._settings.jwt_audience,
            **claims,
        }
        return jwt.encode(payload, self._secret(token_type), algorithm=ALGORITHM)

    def create_access_token(self, user_id: str, email: str) -> str:
        """Mint a short-lived access token."""
        return self._encode(TokenType.ACCESS, user_id, self.access_ttl, email=email)

    def create_refresh_token(self, user_id: str, remember_me: bool = False) -> str:
        """Mint a refresh token; ``remember_me`` selects the longer lifetime."""
        return self._encode(
            TokenType.REFRESH,
            user_id,
            self.refresh_ttl(remember_me),
            remember_me=remember_me,
        )

    def decode(self, token: str, token_type: TokenType) -> TokenPayload:
        """
        Verify signature, expiry, issuer, audience and kind.

        Raises:
            ExpiredTokenError: If the token is past its ``exp``
            InvalidTokenError: For any other verification failure
        """
        try:
            claims = jwt.decode(
                token,
                self._secret(token_type),
                algorithms=[ALGORITHM],
                audience=self._settings.jwt_audience,
                issuer=self._settings.jwt_issuer,
                options={"require": ["sub", "exp", "iat", "jti"]},
            )
            payload = TokenPayload(**claims)
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")
        except PydanticValidationError:
            raise InvalidTokenError("Invalid token: malformed claims")

        if payload.type is not token_type:
            raise InvalidTokenError("Invalid token: wrong token type")
        return payload

    @staticmethod
    def peek_subject(token: str) -> Optional[str]:
        """
        Read ``sub`` without verifying signature or expiry.

        Only for best-effort paths such as logout, where a stale token
        should still identify whose session to drop.
        """
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None
        subject = claims.get("sub")
        return subject if isinstance(subject, str) else None
