"""
Authentication API views.

These endpoints are used by operators to:
- Sign in and renew their token pair
- Log out, revoking their tokens
- Change their password
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.application.commands.auth_commands import (
    ChangePasswordCommand,
    LogoutCommand,
    RenewTokenCommand,
    SignInCommand,
)
from accounts.application.handlers.auth_handlers import (
    ChangePasswordHandler,
    LogoutHandler,
    RenewTokenHandler,
    SignInHandler,
)
from accounts.application.services.credential_store import CredentialStore
from accounts.application.services.token_blacklist import TokenBlacklist
from accounts.application.services.token_service import TokenService
from accounts.infrastructure.repositories.django_secret_vault import DjangoSecretVault
from api.accounts.serializers import (
    ChangePasswordRequestSerializer,
    LogoutRequestSerializer,
    SignInRequestSerializer,
    TokenPairResponseSerializer,
)
from api.exceptions import error_body
from api.licences.serializers import MessageResponseSerializer
from core.infrastructure.cache_adapters import strict_cache_adapter
from core.instrumentation import Status, StatusCode, get_tracer
from core.middleware.auth import extract_token

# Initialize collaborators (in production, use DI container)
_vault = DjangoSecretVault()
_blacklist = TokenBlacklist(strict_cache_adapter)

tracer = get_tracer(__name__)


def _credential_store() -> CredentialStore:
    return CredentialStore(_vault, strict_cache_adapter)


def _token_pair_response(message: str, pair) -> Response:
    return Response(
        {
            "message": message,
            "token": pair.token,
            "refreshToken": pair.refresh_token,
            "user": pair.user,
        },
        status=status.HTTP_200_OK,
    )


def _validation_failed(span, errors) -> Response:
    span.set_attribute("error", "validation_failed")
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response(
        error_body("VALIDATION_ERROR", "Invalid input. Please check your fields.", errors),
        status=status.HTTP_400_BAD_REQUEST,
    )


class SignInView(APIView):
    """View for operator sign-in."""

    @extend_schema(
        operation_id="signin",
        summary="Sign In",
        tags=["Auth"],
        request=SignInRequestSerializer,
        responses={
            200: TokenPairResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid username or password"},
        },
    )
    def post(self, request: Request) -> Response:
        """Sign in."""
        return async_to_sync(self._handle_signin)(request)

    async def _handle_signin(self, request: Request) -> Response:
        """Async handler for sign-in."""
        with tracer.start_as_current_span("signin") as span:
            serializer = SignInRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            data = serializer.validated_data
            span.set_attribute("username", data["username"])

            handler = SignInHandler(
                credential_store=_credential_store(), token_service=TokenService()
            )
            pair = await handler.handle(
                SignInCommand(username=data["username"], password=data["password"])
            )

            span.set_status(Status(StatusCode.OK))
            return _token_pair_response("Sign in successful.", pair)


class RenewTokenView(APIView):
    """View for exchanging a refresh token."""

    @extend_schema(
        operation_id="renew_token",
        summary="Renew Token",
        description="Send the refresh token in the Authorization header.",
        tags=["Auth"],
        request=None,
        responses={
            200: TokenPairResponseSerializer,
            400: {"description": "Refresh token is required"},
            401: {"description": "Refresh token expired or invalidated"},
            403: {"description": "Invalid token"},
        },
    )
    def post(self, request: Request) -> Response:
        """Renew the token pair."""
        return async_to_sync(self._handle_renew_token)(request)

    async def _handle_renew_token(self, request: Request) -> Response:
        """Async handler for token renewal."""
        with tracer.start_as_current_span("renew_token") as span:
            handler = RenewTokenHandler(
                credential_store=_credential_store(),
                token_service=TokenService(),
                blacklist=_blacklist,
            )
            pair = await handler.handle(RenewTokenCommand(refresh_token=extract_token(request)))

            span.set_status(Status(StatusCode.OK))
            return _token_pair_response("Token renewed successfully.", pair)


class LogoutView(APIView):
    """View for logging out."""

    @extend_schema(
        operation_id="logout",
        summary="Logout",
        description=(
            "Revoke the bearer access token and, when supplied, the refresh token."
        ),
        tags=["Auth"],
        request=LogoutRequestSerializer,
        responses={
            200: MessageResponseSerializer,
            401: {"description": "Missing, expired or invalidated token"},
        },
    )
    def post(self, request: Request) -> Response:
        """Log out."""
        return async_to_sync(self._handle_logout)(request)

    async def _handle_logout(self, request: Request) -> Response:
        """Async handler for logout."""
        with tracer.start_as_current_span("logout") as span:
            serializer = LogoutRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            await LogoutHandler(token_service=TokenService(), blacklist=_blacklist).handle(
                LogoutCommand(
                    access_token=getattr(request, "access_token", None) or extract_token(request),
                    refresh_token=serializer.validated_data.get("refreshToken") or None,
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"message": "Logged out successfully."}, status=status.HTTP_200_OK)


class ChangePasswordView(APIView):
    """View for changing an operator password."""

    @extend_schema(
        operation_id="change_password",
        summary="Change Password",
        tags=["Auth"],
        request=ChangePasswordRequestSerializer,
        responses={
            200: MessageResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Current password is incorrect"},
            404: {"description": "User not found"},
        },
    )
    def put(self, request: Request) -> Response:
        """Change password."""
        return async_to_sync(self._handle_change_password)(request)

    async def _handle_change_password(self, request: Request) -> Response:
        """Async handler for password change."""
        with tracer.start_as_current_span("change_password") as span:
            serializer = ChangePasswordRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            data = serializer.validated_data
            span.set_attribute("username", data["username"])

            await ChangePasswordHandler(credential_store=_credential_store()).handle(
                ChangePasswordCommand(
                    username=data["username"],
                    current_password=data["currentPassword"],
                    new_password=data["newPassword"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                {"message": "Password changed successfully."}, status=status.HTTP_200_OK
            )
