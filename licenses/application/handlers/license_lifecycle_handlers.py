"""
License lifecycle handlers.

Handlers for update, delete and activate license commands.
"""
import hmac
import logging
from datetime import date
from typing import Callable, Optional

from core.domain.exceptions import (
    InvalidActivationPasswordError,
    LicenseNotFoundError,
    StoreError,
    StoreErrorKind,
)
from core.metrics import (
    licenses_activated_total,
    licenses_deleted_total,
    licenses_updated_total,
)
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import ActivationResultDTO
from licenses.domain.license import PATCHABLE_FIELDS, LicenseRecord
from licenses.domain.services import PasswordGenerator
from licenses.ports.license_notifier import REASON_UPDATED, LicenseNotifier
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


class UpdateLicenseHandler:
    """Handler for UpdateLicenseCommand."""

    def __init__(
        self,
        license_store: LicenseStore,
        notifier: LicenseNotifier,
        password_generator: Optional[PasswordGenerator] = None,
    ):
        """Initialize handler with its collaborators."""
        self.license_store = license_store
        self.notifier = notifier
        self.password_generator = password_generator or PasswordGenerator()

    async def handle(self, command: UpdateLicenseCommand) -> LicenseRecord:
        """
        Handle update license command.

        Args:
            command: UpdateLicenseCommand

        Returns:
            Updated LicenseRecord carrying the new password

        Raises:
            LicenseNotFoundError: If license not found
        """
        changes = {
            name: value
            for name, value in command.changes.items()
            if name in PATCHABLE_FIELDS and value is not None
        }
        changes["password"] = self.password_generator.generate()

        try:
            updated = await self.license_store.update(
                command.customer_name, command.system_id, changes
            )
        except StoreError as e:
            if e.kind == StoreErrorKind.CONDITION_FAILED:
                raise LicenseNotFoundError() from e
            raise

        licenses_updated_total.inc()
        logger.info(
            "License updated",
            extra={"system_id": updated.system_id, "fields": sorted(changes)},
        )

        try:
            await self.notifier.notify(updated, REASON_UPDATED)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Could not queue credential notification: %s",
                e,
                extra={"system_id": updated.system_id},
                exc_info=True,
            )

        return updated


class DeleteLicenseHandler:
    """Handler for DeleteLicenseCommand."""

    def __init__(self, license_store: LicenseStore):
        """Initialize handler with store."""
        self.license_store = license_store

    async def handle(self, command: DeleteLicenseCommand) -> None:
        """
        Handle delete license command.

        Args:
            command: DeleteLicenseCommand

        Raises:
            LicenseNotFoundError: If license not found
        """
        try:
            await self.license_store.delete(command.customer_name, command.system_id)
        except StoreError as e:
            if e.kind == StoreErrorKind.CONDITION_FAILED:
                raise LicenseNotFoundError(
                    "License not found. It may have already been deleted."
                ) from e
            raise

        licenses_deleted_total.inc()
        logger.info("License deleted", extra={"system_id": command.system_id})


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(
        self,
        license_store: LicenseStore,
        today: Callable[[], date] = date.today,
    ):
        """Initialize handler with store and date source."""
        self.license_store = license_store
        self.today = today

    async def handle(self, command: ActivateLicenseCommand) -> ActivationResultDTO:
        """
        Handle activate license command.

        Activating an active license again succeeds without changing it.

        Args:
            command: ActivateLicenseCommand

        Returns:
            ActivationResultDTO with the public projection and valid_till

        Raises:
            LicenseNotFoundError: If no license has this system ID
            InvalidActivationPasswordError: If the password does not match
        """
        record = await self.license_store.find_by_system_id(command.system_id)
        if record is None:
            licenses_activated_total.labels(outcome="not_found").inc()
            raise LicenseNotFoundError()

        if not hmac.compare_digest(
            record.password.encode("utf-8"), (command.password or "").encode("utf-8")
        ):
            licenses_activated_total.labels(outcome="bad_password").inc()
            logger.warning("Activation with wrong password", extra={"system_id": record.system_id})
            raise InvalidActivationPasswordError()

        if record.is_active:
            licenses_activated_total.labels(outcome="already_active").inc()
            return ActivationResultDTO(activation_res=record.activation_view(), already_active=True)

        try:
            activated = await self.license_store.activate(
                record.system_id, self.today(), command.fe_mac, command.be_mac
            )
        except StoreError as e:
            if e.kind == StoreErrorKind.CONDITION_FAILED:
                raise LicenseNotFoundError() from e
            raise

        licenses_activated_total.labels(outcome="activated").inc()
        logger.info("License activated", extra={"system_id": activated.system_id})
        return ActivationResultDTO(activation_res=activated.activation_view())
