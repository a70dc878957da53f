"""
UpdateLicenseCommand.

Command to patch a license; the activation password is always rotated.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class UpdateLicenseCommand:
    """Command to update a license identified by its key pair."""

    customer_name: str
    system_id: str
    changes: Dict[str, Any] = field(default_factory=dict)
