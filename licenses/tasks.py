"""
Celery tasks for license credential notifications.
"""
import logging

from LicensingService.celery import app

from core.metrics import notifications_failed_total
from licenses.infrastructure.notifications import (
    deliver_license_credentials,
    record_dead_letter,
)

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def deliver_license_credentials_task(self, license_data: dict, reason: str):
    """
    Celery task for credential delivery.

    Retries with exponential backoff; after the last attempt the failure
    is recorded as a dead letter and never re-raised.

    Args:
        license_data: License fields as produced by LicenseRecord.to_dict
        reason: Why the credentials are sent (created or updated)
    """
    try:
        deliver_license_credentials(license_data, reason)
        return True
    except Exception as exc:  # pylint: disable=broad-exception-caught
        attempts = self.request.retries + 1
        if self.request.retries >= self.max_retries:
            logger.error(
                "Credential delivery failed permanently: %s",
                exc,
                extra={"system_id": license_data.get("system_id"), "attempts": attempts},
                exc_info=True,
            )
            notifications_failed_total.labels(reason=reason).inc()
            record_dead_letter(license_data, reason, exc, attempts)
            return False

        logger.warning(
            "Credential delivery failed (attempt %s): %s",
            attempts,
            exc,
            extra={"system_id": license_data.get("system_id")},
        )
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
