"""
DeleteLicenseCommand.
"""

from dataclasses import dataclass


@dataclass
class DeleteLicenseCommand:
    """Command to delete a license identified by its key pair."""

    customer_name: str
    system_id: str
