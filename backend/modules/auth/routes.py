"""
Auth API endpoints.

Signup, login, logout, token refresh, profile and token validation.
Errors raised by the service are rendered by the app's error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_auth_service
from api.middleware.auth import get_auth_context, get_bearer_token
from shared.exceptions import AuthenticationError, AuthorizationError
from shared.models import AuthContext, SuccessResponse

from .interfaces import IAuthService
from .models import (
    AuthResult,
    LoginRequest,
    ProfileResponse,
    RefreshRequest,
    SignupRequest,
    TokenValidationResponse,
)
from .exceptions import InvalidTokenError, RefreshTokenRequiredError

router = APIRouter()


@router.post("/signup", response_model=SuccessResponse[AuthResult], status_code=201)
async def signup(
    request: SignupRequest,
    auth: IAuthService = Depends(get_auth_service),
) -> SuccessResponse[AuthResult]:
    """
    Register a new account and log it in.
    """
    await auth.signup(request.email, request.password)
    result = await auth.login(request.email, request.password)
    return SuccessResponse(message="User registered successfully", data=result)


@router.post("/login", response_model=SuccessResponse[AuthResult])
async def login(
    request: LoginRequest,
    auth: IAuthService = Depends(get_auth_service),
) -> SuccessResponse[AuthResult]:
    """
    Log in with email and password.

    ``rememberMe`` extends the refresh token lifetime.
    """
    result = await auth.login(request.email, request.password, remember_me=request.remember_me)
    return SuccessResponse(message="Login successful", data=result)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    auth: IAuthService = Depends(get_auth_service),
) -> SuccessResponse:
    """
    Revoke the caller's session.

    Always succeeds, even without a token or with an expired one.
    """
    if token:
        await auth.logout(token)
    return SuccessResponse(message="Logout successful")


@router.post("/refresh", response_model=SuccessResponse[AuthResult])
async def refresh(
    request: Optional[RefreshRequest] = None,
    auth: IAuthService = Depends(get_auth_service),
) -> SuccessResponse[AuthResult]:
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token stops working.
    """
    if request is None or not request.refresh_token:
        raise RefreshTokenRequiredError()

    result = await auth.refresh_token(request.refresh_token)
    return SuccessResponse(message="Token refreshed successfully", data=result)


@router.get("/profile", response_model=SuccessResponse[ProfileResponse])
async def profile(
    ctx: AuthContext = Depends(get_auth_context),
) -> SuccessResponse[ProfileResponse]:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return SuccessResponse(data=ProfileResponse(user=ctx.user))


@router.get(
    "/validate",
    response_model=SuccessResponse[TokenValidationResponse],
    responses={401: {"description": "Token is missing or invalid"}},
)
async def validate(
    token: Optional[str] = Depends(get_bearer_token),
    auth: IAuthService = Depends(get_auth_service),
):
    """
    Check whether the bearer token is a valid access token.

    Any token problem is reported as a single 401 with ``valid: false``.
    """
    try:
        user = await auth.validate_token(token or "")
    except (AuthenticationError, AuthorizationError):
        body = InvalidTokenError().to_dict()
        body["data"] = {"valid": False}
        return JSONResponse(status_code=401, content=body)

    return SuccessResponse(data=TokenValidationResponse(valid=True, user=user))
