"""
Unit tests for authentication handlers.
"""
import pytest
from django.contrib.auth.hashers import check_password

from accounts.application.commands.auth_commands import (
    ChangePasswordCommand,
    LogoutCommand,
    RenewTokenCommand,
    SignInCommand,
    VerifyAccessTokenCommand,
)
from accounts.application.handlers.auth_handlers import (
    ChangePasswordHandler,
    LogoutHandler,
    RenewTokenHandler,
    SignInHandler,
    VerifyAccessTokenHandler,
)
from core.domain.exceptions import (
    IncorrectPasswordError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    StoreError,
    TokenRevokedError,
    UserNotFoundError,
    ValidationError,
)


@pytest.fixture
def sign_in(credential_store, token_service):
    """Fixture returning a coroutine function that signs in."""
    handler = SignInHandler(credential_store=credential_store, token_service=token_service)

    async def _sign_in(username="admin", password="admin123"):
        return await handler.handle(SignInCommand(username=username, password=password))

    return _sign_in


@pytest.fixture
def renew_handler(credential_store, token_service, token_blacklist):
    """Fixture for RenewTokenHandler."""
    return RenewTokenHandler(
        credential_store=credential_store,
        token_service=token_service,
        blacklist=token_blacklist,
    )


@pytest.mark.asyncio
class TestSignInHandler:
    """Tests for SignInHandler."""

    async def test_sign_in(self, sign_in, token_service):
        """Test the default administrator can sign in."""
        pair = await sign_in()

        assert pair.user == {"username": "admin", "role": "admin", "email": "admin@example.com", "phone": ""}
        assert token_service.decode(pair.token)["username"] == "admin"
        assert token_service.is_refresh_token(token_service.decode(pair.refresh_token))

    async def test_wrong_password_and_unknown_user_look_alike(self, sign_in):
        """Test both failures raise the same error and message."""
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await sign_in(password="nope")
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            await sign_in(username="mallory", password="nope")

        assert wrong_password.value.code == unknown_user.value.code
        assert wrong_password.value.message == unknown_user.value.message

    async def test_missing_fields(self, sign_in):
        """Test blank credentials are a validation error."""
        with pytest.raises(ValidationError):
            await sign_in(username="", password="")


@pytest.mark.asyncio
class TestRenewTokenHandler:
    """Tests for RenewTokenHandler."""

    async def test_renew_rotates_refresh_token(self, sign_in, renew_handler):
        """Test a refresh token can be used exactly once."""
        pair = await sign_in()

        renewed = await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))
        assert renewed.refresh_token != pair.refresh_token

        with pytest.raises(TokenRevokedError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))

        again = await renew_handler.handle(RenewTokenCommand(refresh_token=renewed.refresh_token))
        assert again.user["username"] == "admin"

    async def test_access_token_refused(self, sign_in, renew_handler):
        """Test an access token cannot be used to renew."""
        pair = await sign_in()
        with pytest.raises(InvalidTokenError, match="Refresh token required"):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.token))

    async def test_missing_token(self, renew_handler):
        """Test a missing token is a validation error."""
        with pytest.raises(ValidationError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=None))

    async def test_deleted_user(self, sign_in, renew_handler, secret_vault, credential_store):
        """Test renewing for a user no longer in the vault."""
        pair = await sign_in()
        secret_vault.secrets["test-credentials"] = {}
        await credential_store.invalidate()

        with pytest.raises(UserNotFoundError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))


@pytest.mark.asyncio
class TestLogoutAndVerify:
    """Tests for LogoutHandler and VerifyAccessTokenHandler."""

    async def test_logout_revokes_both_tokens(
        self, sign_in, token_service, token_blacklist, renew_handler
    ):
        """Test logout revokes the access and refresh tokens."""
        pair = await sign_in()
        verify = VerifyAccessTokenHandler(token_service=token_service, blacklist=token_blacklist)
        assert (await verify.handle(VerifyAccessTokenCommand(token=pair.token)))["username"] == "admin"

        await LogoutHandler(token_service=token_service, blacklist=token_blacklist).handle(
            LogoutCommand(access_token=pair.token, refresh_token=pair.refresh_token)
        )

        with pytest.raises(TokenRevokedError):
            await verify.handle(VerifyAccessTokenCommand(token=pair.token))
        with pytest.raises(TokenRevokedError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))

    async def test_logout_is_idempotent(self, token_service, token_blacklist):
        """Test logging out twice or without tokens succeeds."""
        handler = LogoutHandler(token_service=token_service, blacklist=token_blacklist)
        await handler.handle(LogoutCommand())
        await handler.handle(LogoutCommand(access_token="abc"))
        await handler.handle(LogoutCommand(access_token="abc"))

    async def test_verify_missing_token(self, token_service, token_blacklist):
        """Test a missing bearer token."""
        verify = VerifyAccessTokenHandler(token_service=token_service, blacklist=token_blacklist)
        with pytest.raises(MissingTokenError):
            await verify.handle(VerifyAccessTokenCommand(token=None))


@pytest.mark.asyncio
class TestChangePasswordHandler:
    """Tests for ChangePasswordHandler."""

    async def test_change_password(self, credential_store, sign_in):
        """Test the new password works and the old one does not."""
        await ChangePasswordHandler(credential_store).handle(
            ChangePasswordCommand(username="admin", current_password="admin123", new_password="n3w!")
        )

        user = await credential_store.get_user("admin")
        assert check_password("n3w!", user.password)
        assert (await sign_in(password="n3w!")).user["username"] == "admin"
        with pytest.raises(InvalidCredentialsError):
            await sign_in(password="admin123")

    async def test_wrong_current_password(self, credential_store):
        """Test a wrong current password is refused."""
        with pytest.raises(IncorrectPasswordError):
            await ChangePasswordHandler(credential_store).handle(
                ChangePasswordCommand(username="admin", current_password="bad", new_password="x")
            )

    async def test_unknown_user(self, credential_store):
        """Test changing the password of an unknown user."""
        with pytest.raises(UserNotFoundError):
            await ChangePasswordHandler(credential_store).handle(
                ChangePasswordCommand(username="ghost", current_password="a", new_password="b")
            )


@pytest.mark.asyncio
class TestCacheOutage:
    """Tests for auth handlers while the cache fails."""

    async def test_renew_fails_when_revocation_is_lost(
        self, sign_in, renew_handler, memory_cache
    ):
        """Test no new pair is handed out unless the old refresh token is revoked."""
        pair = await sign_in()
        memory_cache.break_for("auth:blacklist:", operations=("set",))

        with pytest.raises(StoreError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))

        memory_cache.broken = None
        await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))
        with pytest.raises(TokenRevokedError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))

    async def test_renew_fails_when_blacklist_unreadable(
        self, sign_in, renew_handler, memory_cache
    ):
        """Test a failed blacklist read is not treated as a miss."""
        pair = await sign_in()
        memory_cache.break_for("auth:blacklist:", operations=("get",))

        with pytest.raises(StoreError):
            await renew_handler.handle(RenewTokenCommand(refresh_token=pair.refresh_token))

    async def test_logout_fails_when_revocation_is_lost(
        self, sign_in, token_service, token_blacklist, memory_cache
    ):
        """Test logout reports the failure instead of success."""
        pair = await sign_in()
        memory_cache.break_for("auth:blacklist:", operations=("set",))

        with pytest.raises(StoreError):
            await LogoutHandler(token_service, token_blacklist).handle(
                LogoutCommand(access_token=pair.token, refresh_token=pair.refresh_token)
            )

    async def test_verify_refuses_revoked_token_when_blacklist_unreadable(
        self, sign_in, token_service, token_blacklist, memory_cache
    ):
        """Test a revoked token is never accepted during an outage."""
        pair = await sign_in()
        await LogoutHandler(token_service, token_blacklist).handle(
            LogoutCommand(access_token=pair.token)
        )
        memory_cache.break_for("auth:blacklist:", operations=("get",))

        with pytest.raises(StoreError):
            await VerifyAccessTokenHandler(token_service, token_blacklist).handle(
                VerifyAccessTokenCommand(token=pair.token)
            )

    async def test_change_password_fails_when_cache_keeps_old_hash(
        self, sign_in, credential_store, memory_cache
    ):
        """Test a password change whose cached copy cannot be dropped is reported."""
        await sign_in()
        memory_cache.break_for("auth:credentials:", operations=("delete",))

        with pytest.raises(StoreError):
            await ChangePasswordHandler(credential_store).handle(
                ChangePasswordCommand(
                    username="admin", current_password="admin123", new_password="n3w-pass"
                )
            )
