"""
Authentication DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class TokenPairDTO:
    """DTO for an issued token pair and the signed-in user."""

    token: str
    refresh_token: str
    user: Dict[str, Any]
