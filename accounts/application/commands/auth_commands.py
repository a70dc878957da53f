"""
Authentication commands.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SignInCommand:
    """Command to sign in with username and password."""

    username: str
    password: str


@dataclass
class RenewTokenCommand:
    """Command to exchange a refresh token for a new token pair."""

    refresh_token: Optional[str]


@dataclass
class LogoutCommand:
    """Command to revoke the tokens of a session."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


@dataclass
class ChangePasswordCommand:
    """Command to change an operator password."""

    username: str
    current_password: str
    new_password: str


@dataclass
class VerifyAccessTokenCommand:
    """Command to verify a bearer token presented to a protected route."""

    token: Optional[str]
