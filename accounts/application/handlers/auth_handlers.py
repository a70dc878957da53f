"""
Authentication handlers.

Handlers for sign-in, token renewal, logout, password change and
access token verification.
"""
import logging
from dataclasses import replace
from typing import Any, Dict

from django.contrib.auth.hashers import check_password, make_password

from accounts.application.commands.auth_commands import (
    ChangePasswordCommand,
    LogoutCommand,
    RenewTokenCommand,
    SignInCommand,
    VerifyAccessTokenCommand,
)
from accounts.application.dto.auth_dto import TokenPairDTO
from accounts.application.services.credential_store import CredentialStore
from accounts.application.services.token_blacklist import TokenBlacklist
from accounts.application.services.token_service import TokenService
from accounts.domain.user_credential import UserCredential
from core.domain.exceptions import (
    IncorrectPasswordError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    TokenRevokedError,
    UserNotFoundError,
    ValidationError,
)
from core.metrics import sign_ins_total, tokens_renewed_total

logger = logging.getLogger(__name__)


def _issue_pair(token_service: TokenService, user: UserCredential) -> TokenPairDTO:
    return TokenPairDTO(
        token=token_service.issue_access_token(user),
        refresh_token=token_service.issue_refresh_token(user),
        user=user.public_profile(),
    )


class SignInHandler:
    """Handler for SignInCommand."""

    def __init__(self, credential_store: CredentialStore, token_service: TokenService):
        """Initialize handler with its collaborators."""
        self.credential_store = credential_store
        self.token_service = token_service

    async def handle(self, command: SignInCommand) -> TokenPairDTO:
        """
        Handle sign-in command.

        Unknown usernames and wrong passwords fail the same way, and an
        unknown username still costs one password hash.

        Args:
            command: SignInCommand

        Returns:
            TokenPairDTO with access token, refresh token and profile

        Raises:
            ValidationError: If username or password is missing
            InvalidCredentialsError: If the credentials do not match
            StoreError: If the credential vault is unavailable
        """
        if not command.username or not command.password:
            raise ValidationError("Username and password are required.")

        user = await self.credential_store.get_user(command.username)
        if user is None:
            make_password(command.password)
            sign_ins_total.labels(outcome="failure").inc()
            raise InvalidCredentialsError()

        if not check_password(command.password, user.password):
            sign_ins_total.labels(outcome="failure").inc()
            logger.warning("Failed sign-in", extra={"username": command.username})
            raise InvalidCredentialsError()

        sign_ins_total.labels(outcome="success").inc()
        logger.info("User signed in", extra={"username": user.username})
        return _issue_pair(self.token_service, user)


class RenewTokenHandler:
    """Handler for RenewTokenCommand."""

    def __init__(
        self,
        credential_store: CredentialStore,
        token_service: TokenService,
        blacklist: TokenBlacklist,
    ):
        """Initialize handler with its collaborators."""
        self.credential_store = credential_store
        self.token_service = token_service
        self.blacklist = blacklist

    async def handle(self, command: RenewTokenCommand) -> TokenPairDTO:
        """
        Handle renew token command.

        The presented refresh token is revoked once the new pair is issued.

        Args:
            command: RenewTokenCommand

        Returns:
            TokenPairDTO with a fresh token pair

        Raises:
            ValidationError: If no refresh token was presented
            TokenExpiredError: If the refresh token has expired
            InvalidTokenError: If the token is invalid or not a refresh token
            TokenRevokedError: If the refresh token was already revoked
            UserNotFoundError: If the user no longer exists
        """
        token = command.refresh_token
        if not token:
            raise ValidationError("Refresh token is required.")

        claims = self.token_service.decode(
            token, expired_message="Refresh token has expired. Please sign in again."
        )
        if not self.token_service.is_refresh_token(claims):
            raise InvalidTokenError("Invalid token type. Refresh token required.")

        if await self.blacklist.contains(token):
            raise TokenRevokedError("Refresh token has been invalidated. Please sign in again.")

        user = await self.credential_store.get_user(claims.get("username", ""))
        if user is None:
            raise UserNotFoundError("User not found.")

        pair = _issue_pair(self.token_service, user)
        await self.blacklist.add(token, self.token_service.remaining_lifetime(token))
        tokens_renewed_total.inc()
        logger.info("Token pair renewed", extra={"username": user.username})
        return pair


class LogoutHandler:
    """Handler for LogoutCommand."""

    def __init__(self, token_service: TokenService, blacklist: TokenBlacklist):
        """Initialize handler with its collaborators."""
        self.token_service = token_service
        self.blacklist = blacklist

    async def handle(self, command: LogoutCommand) -> None:
        """
        Handle logout command by revoking every supplied token.

        Args:
            command: LogoutCommand
        """
        for token in (command.access_token, command.refresh_token):
            if token:
                await self.blacklist.add(token, self.token_service.remaining_lifetime(token))
        logger.info("User logged out")


class ChangePasswordHandler:
    """Handler for ChangePasswordCommand."""

    def __init__(self, credential_store: CredentialStore):
        """Initialize handler with credential store."""
        self.credential_store = credential_store

    async def handle(self, command: ChangePasswordCommand) -> None:
        """
        Handle change password command.

        Args:
            command: ChangePasswordCommand

        Raises:
            ValidationError: If a field is missing
            UserNotFoundError: If the user does not exist
            IncorrectPasswordError: If the current password does not match
        """
        if not command.username or not command.current_password or not command.new_password:
            raise ValidationError("Username, current password and new password are required.")

        user = await self.credential_store.get_user(command.username)
        if user is None:
            raise UserNotFoundError("User not found.")

        if not check_password(command.current_password, user.password):
            logger.warning("Password change with wrong password", extra={"username": user.username})
            raise IncorrectPasswordError()

        await self.credential_store.save_user(
            replace(user, password=make_password(command.new_password))
        )
        logger.info("Password changed", extra={"username": user.username})


class VerifyAccessTokenHandler:
    """Handler for VerifyAccessTokenCommand."""

    def __init__(self, token_service: TokenService, blacklist: TokenBlacklist):
        """Initialize handler with its collaborators."""
        self.token_service = token_service
        self.blacklist = blacklist

    async def handle(self, command: VerifyAccessTokenCommand) -> Dict[str, Any]:
        """
        Handle verify access token command.

        Args:
            command: VerifyAccessTokenCommand

        Returns:
            Token claims

        Raises:
            MissingTokenError: If no token was presented
            TokenRevokedError: If the token was revoked
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is malformed or badly signed
        """
        if not command.token:
            raise MissingTokenError()
        if await self.blacklist.contains(command.token):
            raise TokenRevokedError()
        return self.token_service.decode(command.token)
