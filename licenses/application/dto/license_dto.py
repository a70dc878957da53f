"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class CreateLicenseResultDTO:
    """DTO for a created license and its sealed payloads."""

    license_data: Dict[str, Any]
    encrypted_payload: Dict[str, Any]
    sealed_payload: str


@dataclass
class ActivationResultDTO:
    """DTO for an activation response."""

    activation_res: Dict[str, Any]
    already_active: bool = False
