import pytest
import jwt

from modules.auth.exceptions import ExpiredTokenError, InvalidTokenError
from modules.auth.models import TokenType
from modules.auth.tokens import TokenCodec
from shared.config import Settings
from tests.conftest import TEST_JWT_SECRET, create_test_token


class TestTokenCodec:
    @pytest.fixture
    def codec(self, settings):
        return TokenCodec(settings)

    def test_requires_secrets(self):
        with pytest.raises(RuntimeError, match="JWT secrets not configured"):
            TokenCodec(Settings(_env_file=None, jwt_secret="", jwt_refresh_secret=""))

    def test_access_token_round_trip(self, codec):
        token = codec.create_access_token("user-1", "a@example.com")
        payload = codec.decode(token, TokenType.ACCESS)

        assert payload.sub == "user-1"
        assert payload.email == "a@example.com"
        assert payload.type is TokenType.ACCESS
        assert payload.exp - payload.iat == 3600
        assert payload.iss == "task-management-api"
        assert payload.aud == "task-management-app"

    def test_refresh_ttl_depends_on_remember_me(self, codec):
        short = codec.decode(codec.create_refresh_token("user-1"), TokenType.REFRESH)
        long = codec.decode(codec.create_refresh_token("user-1", remember_me=True), TokenType.REFRESH)

        assert short.exp - short.iat == 7 * 24 * 3600
        assert long.exp - long.iat == 30 * 24 * 3600
        assert long.remember_me is True

    def test_tokens_minted_together_differ(self, codec):
        assert codec.create_refresh_token("user-1") != codec.create_refresh_token("user-1")

    def test_access_token_rejected_as_refresh(self, codec):
        token = codec.create_access_token("user-1", "a@example.com")
        with pytest.raises(InvalidTokenError):
            codec.decode(token, TokenType.REFRESH)

    def test_refresh_token_rejected_as_access(self, codec):
        token = codec.create_refresh_token("user-1")
        with pytest.raises(InvalidTokenError):
            codec.decode(token, TokenType.ACCESS)

    def test_wrong_type_claim_with_right_secret(self, codec):
        token = create_test_token(token_type="refresh")
        with pytest.raises(InvalidTokenError, match="wrong token type"):
            codec.decode(token, TokenType.ACCESS)

    def test_expired(self, codec):
        with pytest.raises(ExpiredTokenError):
            codec.decode(create_test_token(expired=True), TokenType.ACCESS)

    def test_bad_signature(self, codec):
        token = create_test_token(secret="some-other-secret-that-is-long-enough-123")
        with pytest.raises(InvalidTokenError):
            codec.decode(token, TokenType.ACCESS)

    def test_wrong_audience(self, codec):
        with pytest.raises(InvalidTokenError):
            codec.decode(create_test_token(aud="someone-else"), TokenType.ACCESS)

    def test_missing_jti(self, codec):
        token = jwt.encode(
            {"sub": "u", "type": "access", "iat": 1, "exp": 9999999999,
             "iss": "task-management-api", "aud": "task-management-app"},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            codec.decode(token, TokenType.ACCESS)

    def test_garbage(self, codec):
        with pytest.raises(InvalidTokenError):
            codec.decode("not-a-valid-token", TokenType.ACCESS)

    def test_peek_subject_ignores_expiry_and_signature(self):
        token = create_test_token(user_id="user-9", expired=True, secret="another-secret-that-is-long-enough-12345")
        assert TokenCodec.peek_subject(token) == "user-9"

    def test_peek_subject_garbage(self):
        assert TokenCodec.peek_subject("garbage") is None
