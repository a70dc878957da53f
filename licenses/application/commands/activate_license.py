"""
ActivateLicenseCommand.

Command issued by an installation to activate its license.
"""

from dataclasses import dataclass


@dataclass
class ActivateLicenseCommand:
    """
    Command to activate a license.

    The installation proves possession of the credentials it received by
    email and binds its MAC addresses to the license.
    """

    system_id: str
    password: str
    fe_mac: str = ""
    be_mac: str = ""
