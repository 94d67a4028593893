import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from modules.auth.models import (
    AuthResult,
    LoginRequest,
    RefreshRequest,
    SignupRequest,
    TokenPayload,
    TokenType,
    UserRecord,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_record(**overrides) -> UserRecord:
    data = {
        "id": "user-123",
        "email": "test@example.com",
        "password_hash": "$2b$04$hash",
        "created_at": NOW,
        "updated_at": NOW,
        **overrides,
    }
    return UserRecord(**data)


class TestUserRecord:
    def test_to_public_drops_password_hash(self):
        user = make_record().to_public()
        assert user.id == "user-123"
        assert not hasattr(user, "password_hash")
        assert "password" not in str(user.model_dump())

    def test_password_hash_not_in_repr(self):
        assert "$2b$04$hash" not in repr(make_record())


class TestTokenPayload:
    def test_parse_access_payload(self):
        """Should parse JWT claims from dict."""
        payload = TokenPayload(
            sub="user-123",
            type="access",
            exp=1704067200,
            iat=1704063600,
            jti="abc",
            email="test@example.com",
        )
        assert payload.type is TokenType.ACCESS
        assert payload.remember_me is False

    def test_type_is_required(self):
        with pytest.raises(ValidationError):
            TokenPayload(sub="user-123", exp=1, iat=1, jti="abc")


class TestAuthResult:
    def test_serializes_camel_case(self):
        result = AuthResult(
            user=make_record().to_public(),
            access_token="a",
            refresh_token="r",
            expires_in=3600,
        )
        data = result.model_dump(by_alias=True)
        assert data["accessToken"] == "a"
        assert data["refreshToken"] == "r"
        assert data["expiresIn"] == 3600
        assert "passwordHash" not in data["user"]


class TestRequests:
    def test_signup_validates_email(self):
        with pytest.raises(ValidationError):
            SignupRequest(email="nope", password="secret1")

    @pytest.mark.parametrize("password", ["12345", "x" * 129])
    def test_signup_password_length(self, password):
        with pytest.raises(ValidationError):
            SignupRequest(email="a@example.com", password=password)

    def test_login_accepts_camel_case_remember_me(self):
        request = LoginRequest.model_validate(
            {"email": "a@example.com", "password": "secret1", "rememberMe": True}
        )
        assert request.remember_me is True

    def test_refresh_token_optional(self):
        assert RefreshRequest().refresh_token is None
        assert RefreshRequest.model_validate({"refreshToken": "r"}).refresh_token == "r"
