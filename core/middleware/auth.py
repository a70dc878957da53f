"""
Bearer token authentication middleware.

This middleware validates JWT access tokens for operator routes.
"""

import logging
from typing import Optional

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from accounts.application.commands.auth_commands import VerifyAccessTokenCommand
from accounts.application.handlers.auth_handlers import VerifyAccessTokenHandler
from accounts.application.services.token_blacklist import TokenBlacklist
from accounts.application.services.token_service import TokenService
from api.exceptions import error_body, status_for_exception
from core.domain.exceptions import AuthException, StoreError
from core.infrastructure.cache_adapters import strict_cache_adapter

logger = logging.getLogger(__name__)

DEFAULT_PROTECTED_PATHS = ("/api/logout", "/api/changePassword")


def extract_token(request: HttpRequest) -> Optional[str]:
    """
    Read a token from the Authorization header.

    Accepts both ``Bearer <token>`` and a bare token.

    Args:
        request: HTTP request

    Returns:
        Token string or None if the header is absent or empty
    """
    header = request.headers.get("Authorization", "").strip()
    if header.startswith("Bearer "):
        header = header[len("Bearer "):].strip()
    return header or None


class JWTAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for bearer token authentication.

    This middleware:
    1. Protects the operator routes listed in AUTH_PROTECTED_PATHS
    2. Rejects missing, revoked, expired or invalid access tokens, and
       refuses every token while the blacklist cannot be read
    3. Stores the token claims on the request as ``auth_claims``
    """

    def __init__(self, get_response=None):
        """Initialize middleware."""
        super().__init__(get_response)
        self.protected_paths = tuple(
            getattr(settings, "AUTH_PROTECTED_PATHS", DEFAULT_PROTECTED_PATHS)
        )

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            JsonResponse with 401/403 if authentication fails, 503 if the
            blacklist is unreachable, None otherwise
        """
        if not self._requires_auth(request.path):
            return None

        token = extract_token(request)
        handler = VerifyAccessTokenHandler(
            token_service=TokenService(),
            blacklist=TokenBlacklist(strict_cache_adapter),
        )
        try:
            claims = async_to_sync(handler.handle)(VerifyAccessTokenCommand(token=token))
        except AuthException as e:
            logger.warning(
                "Rejected token on %s: %s", request.path, e.code, extra={"path": request.path}
            )
            return JsonResponse(error_body(e.code, e.message), status=status_for_exception(e))
        except StoreError as e:
            logger.error(
                "Token check unavailable on %s: %s",
                request.path,
                e.detail,
                extra={"path": request.path},
            )
            return JsonResponse(error_body(e.code, e.message), status=status_for_exception(e))

        request.auth_claims = claims  # type: ignore
        request.access_token = token  # type: ignore
        return None

    def _requires_auth(self, path: str) -> bool:
        """
        Check if this path requires a bearer token.

        Args:
            path: Request path

        Returns:
            True if the path is protected
        """
        normalized = path.rstrip("/")
        return normalized in self.protected_paths
