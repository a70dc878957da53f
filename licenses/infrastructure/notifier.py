"""
Celery implementation of LicenseNotifier port.
"""
import logging

from asgiref.sync import sync_to_async

from licenses.domain.license import LicenseRecord
from licenses.ports.license_notifier import LicenseNotifier

logger = logging.getLogger(__name__)


class CeleryLicenseNotifier(LicenseNotifier):
    """Queues credential delivery as a Celery task."""

    async def notify(self, record: LicenseRecord, reason: str) -> None:
        """
        Queue credential delivery.

        Args:
            record: License whose credentials are sent
            reason: Why the credentials are sent (created or updated)
        """
        from licenses.tasks import deliver_license_credentials_task

        await sync_to_async(deliver_license_credentials_task.delay)(record.to_dict(), reason)
        logger.info(
            "Credential notification queued",
            extra={"system_id": record.system_id, "reason": reason},
        )
