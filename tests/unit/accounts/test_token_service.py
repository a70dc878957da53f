"""
Unit tests for TokenService and TokenBlacklist.
"""
from datetime import timedelta

import jwt
import pytest

from accounts.application.services.token_service import TokenService
from accounts.domain.user_credential import UserCredential
from core.domain.exceptions import InvalidTokenError, TokenExpiredError
from core.domain.value_objects import UserRole

USER = UserCredential(username="alice", password="hash", role=UserRole.ADMIN, email="a@x.example")


class TestTokenService:
    """Tests for TokenService."""

    def test_access_token_claims(self, token_service):
        """Test access tokens carry identity and role."""
        claims = token_service.decode(token_service.issue_access_token(USER))
        assert claims["username"] == "alice"
        assert claims["role"] == "admin"
        assert claims["email"] == "a@x.example"
        assert claims["exp"] - claims["iat"] == 24 * 3600
        assert not token_service.is_refresh_token(claims)

    def test_refresh_token_claims(self, token_service):
        """Test refresh tokens are marked and live seven days."""
        claims = token_service.decode(token_service.issue_refresh_token(USER))
        assert claims["username"] == "alice"
        assert token_service.is_refresh_token(claims)
        assert claims["exp"] - claims["iat"] == 7 * 24 * 3600

    def test_tokens_are_unique(self, token_service):
        """Test two tokens issued in the same second differ."""
        assert token_service.issue_refresh_token(USER) != token_service.issue_refresh_token(USER)

    def test_expired(self):
        """Test expired tokens raise TokenExpiredError with the given message."""
        service = TokenService(signing_key="k", access_lifetime=timedelta(seconds=-1))
        token = service.issue_access_token(USER)
        with pytest.raises(TokenExpiredError, match="sign in again"):
            service.decode(token, expired_message="Expired. Please sign in again.")

    def test_bad_signature(self, token_service):
        """Test tokens signed with another key are invalid."""
        forged = jwt.encode({"username": "alice"}, "other-key", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            token_service.decode(forged)

    def test_garbage(self, token_service):
        """Test malformed tokens are invalid."""
        with pytest.raises(InvalidTokenError):
            token_service.decode("not-a-jwt")

    def test_remaining_lifetime(self, token_service):
        """Test remaining lifetime of a fresh and an unreadable token."""
        remaining = token_service.remaining_lifetime(token_service.issue_access_token(USER))
        assert 24 * 3600 - 5 <= remaining <= 24 * 3600
        assert token_service.remaining_lifetime("garbage") == 7 * 24 * 3600


@pytest.mark.asyncio
class TestTokenBlacklist:
    """Tests for TokenBlacklist."""

    async def test_add_and_contains(self, token_blacklist, memory_cache):
        """Test a revoked token is found and stored by digest."""
        assert await token_blacklist.contains("tok") is False
        await token_blacklist.add("tok", 60)
        assert await token_blacklist.contains("tok") is True
        assert all("tok" not in key for key in memory_cache.data)
