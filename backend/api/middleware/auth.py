"""
Bearer token authentication dependencies.

Extracts the access token from the Authorization header and validates it
through the auth service. Failures raise auth module exceptions, which the
app's error handlers turn into 401/403 responses.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import MissingTokenError
from modules.auth.interfaces import IAuthService
from shared.models import AuthContext

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    Dependency that returns the raw bearer token, if any, without validating it.

    Used by logout and token validation, which handle bad tokens themselves.
    """
    if credentials is None:
        return None
    return credentials.credentials


async def get_auth_context(
    token: Optional[str] = Depends(get_bearer_token),
    auth: IAuthService = Depends(get_auth_service),
) -> AuthContext:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(ctx: AuthContext = Depends(get_auth_context)):
            return {"user_id": ctx.user_id}
    """
    if not token:
        raise MissingTokenError()

    user = await auth.validate_token(token)
    return AuthContext(user=user, access_token=token)


# Type alias for cleaner route definitions
RequireAuth = Depends(get_auth_context)
