"""
CreateLicenseCommand.

Command to issue a new license to a customer.
"""

from dataclasses import dataclass


@dataclass
class CreateLicenseCommand:
    """
    Command to create a license.

    The system ID and the activation password are derived by the handler.
    """

    customer_name: str
    site_name: str
    device_count: int
    validity: int  # Months, counted from activation
    email: str
    description: str = ""
    file_url: str = ""

    def fingerprint_parts(self):
        """Return the fields that identify a repeated submission."""
        return (
            self.customer_name,
            self.site_name,
            self.device_count,
            self.validity,
            self.email,
            self.description,
            self.file_url,
        )
