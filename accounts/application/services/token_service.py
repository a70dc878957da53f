"""
JWT token service.

Issues and verifies HS256 access and refresh tokens with PyJWT.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from django.conf import settings

from accounts.domain.user_credential import UserCredential
from core.domain.exceptions import InvalidTokenError, TokenExpiredError

REFRESH_CLAIM = "isRefreshToken"


class TokenService:
    """Issues and verifies signed tokens."""

    def __init__(
        self,
        signing_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_lifetime: Optional[timedelta] = None,
        refresh_lifetime: Optional[timedelta] = None,
    ):
        """
        Initialize service; unset arguments come from settings.AUTH_TOKENS.

        Args:
            signing_key: HMAC signing key
            algorithm: JWT algorithm
            access_lifetime: Access token lifetime
            refresh_lifetime: Refresh token lifetime
        """
        config = getattr(settings, "AUTH_TOKENS", {})
        self.signing_key = signing_key or config.get("SIGNING_KEY") or settings.SECRET_KEY
        self.algorithm = algorithm or config.get("ALGORITHM", "HS256")
        self.access_lifetime = access_lifetime or config.get(
            "ACCESS_TOKEN_LIFETIME", timedelta(hours=24)
        )
        self.refresh_lifetime = refresh_lifetime or config.get(
            "REFRESH_TOKEN_LIFETIME", timedelta(days=7)
        )

    def _encode(self, claims: Dict[str, Any], lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload.update({"iat": now, "exp": now + lifetime, "jti": uuid.uuid4().hex})
        return jwt.encode(payload, self.signing_key, algorithm=self.algorithm)

    def issue_access_token(self, user: UserCredential) -> str:
        """Issue an access token carrying the user's identity and role."""
        return self._encode(
            {"username": user.username, "role": user.role.value, "email": user.email},
            self.access_lifetime,
        )

    def issue_refresh_token(self, user: UserCredential) -> str:
        """Issue a refresh token for the user."""
        return self._encode(
            {"username": user.username, REFRESH_CLAIM: True},
            self.refresh_lifetime,
        )

    def decode(self, token: str, expired_message: str = "Token has expired") -> Dict[str, Any]:
        """
        Verify a token and return its claims.

        Args:
            token: Encoded token
            expired_message: Message used when the token has expired

        Returns:
            Token claims

        Raises:
            TokenExpiredError: If the signature is valid but the token expired
            InvalidTokenError: If the token is malformed or badly signed
        """
        try:
            return jwt.decode(token, self.signing_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(expired_message) from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError() from e

    @staticmethod
    def is_refresh_token(claims: Dict[str, Any]) -> bool:
        """Return True if the claims belong to a refresh token."""
        return bool(claims.get(REFRESH_CLAIM))

    def remaining_lifetime(self, token: str) -> int:
        """
        Return the seconds left before a token expires.

        Unverifiable tokens get the refresh lifetime, the longest any
        token issued here can live.
        """
        try:
            claims = jwt.decode(
                token,
                self.signing_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
            expires_at = int(claims["exp"])
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError):
            return int(self.refresh_lifetime.total_seconds())
        remaining = expires_at - int(datetime.now(timezone.utc).timestamp())
        return max(remaining, 1)
