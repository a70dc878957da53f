"""
License notifier port (interface).

Delivers activation credentials to the license recipient.
"""
from abc import ABC, abstractmethod

from licenses.domain.license import LicenseRecord

REASON_CREATED = "created"
REASON_UPDATED = "updated"


class LicenseNotifier(ABC):
    """Abstract credential notifier."""

    @abstractmethod
    async def notify(self, record: LicenseRecord, reason: str) -> None:
        """
        Schedule delivery of the credentials of a license.

        Delivery happens in the background; this call returns once the
        delivery is queued.

        Args:
            record: License whose credentials are sent
            reason: REASON_CREATED or REASON_UPDATED
        """
        pass
