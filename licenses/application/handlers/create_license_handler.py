"""
CreateLicenseHandler.

Handles the create license command.
"""
import logging
from datetime import date
from typing import Callable, Optional

from core.domain.exceptions import (
    DuplicateSubmissionError,
    LicenseAlreadyExistsError,
    SimilarLicenseExistsError,
    StoreError,
    StoreErrorKind,
)
from core.metrics import duplicate_submissions_rejected_total, licenses_created_total
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.dto.license_dto import CreateLicenseResultDTO
from licenses.application.services.duplicate_guard import DuplicateGuard
from licenses.domain.license import LicenseRecord
from licenses.domain.payload_sealer import PayloadSealer
from licenses.domain.services import PasswordGenerator, SystemIdFormatter
from licenses.ports.license_notifier import REASON_CREATED, LicenseNotifier
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


class CreateLicenseHandler:
    """Handler for CreateLicenseCommand."""

    def __init__(
        self,
        license_store: LicenseStore,
        notifier: LicenseNotifier,
        duplicate_guard: DuplicateGuard,
        sealer: Optional[PayloadSealer] = None,
        password_generator: Optional[PasswordGenerator] = None,
        system_id_formatter: Optional[SystemIdFormatter] = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize handler with its collaborators."""
        self.license_store = license_store
        self.notifier = notifier
        self.duplicate_guard = duplicate_guard
        self.sealer = sealer or PayloadSealer()
        self.password_generator = password_generator or PasswordGenerator()
        self.system_id_formatter = system_id_formatter or SystemIdFormatter()
        self.today = today

    async def _has_similar_license(self, command: CreateLicenseCommand) -> bool:
        """
        Check whether the customer already holds a license with the same terms.

        The scan is best-effort: a failing lookup is logged and treated as
        no match.
        """
        try:
            existing = await self.license_store.find_by_customer(command.customer_name)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Similar-license scan failed, continuing: %s", e)
            return False

        wanted = (
            str(command.site_name),
            str(command.device_count),
            str(command.validity),
            str(command.email),
        )
        return any(
            (
                str(record.site_name),
                str(record.device_count),
                str(record.validity),
                str(record.email),
            )
            == wanted
            for record in existing
        )

    async def handle(self, command: CreateLicenseCommand) -> CreateLicenseResultDTO:
        """
        Handle create license command.

        Args:
            command: CreateLicenseCommand

        Returns:
            CreateLicenseResultDTO with the stored record and sealed payloads

        Raises:
            SimilarLicenseExistsError: If the customer holds a license with the same terms
            DuplicateSubmissionError: If an identical request was just submitted
            LicenseAlreadyExistsError: If the derived key pair is taken
        """
        if await self._has_similar_license(command):
            duplicate_submissions_rejected_total.labels(reason="similar").inc()
            raise SimilarLicenseExistsError()

        fingerprint = DuplicateGuard.fingerprint(command.fingerprint_parts())
        if await self.duplicate_guard.should_reject(fingerprint):
            duplicate_submissions_rejected_total.labels(reason="window").inc()
            raise DuplicateSubmissionError()

        issued_on = self.today()
        sequence = await self.license_store.count_for_customer(command.customer_name) + 1
        system_id = self.system_id_formatter.format(
            command.customer_name,
            command.site_name,
            command.device_count,
            sequence,
            issued_on,
        )

        record = LicenseRecord.create(
            customer_name=command.customer_name,
            system_id=system_id,
            site_name=command.site_name,
            device_count=command.device_count,
            validity=command.validity,
            email=command.email,
            password=self.password_generator.generate(),
            generated_date=issued_on,
            description=command.description,
            file_url=command.file_url,
        )

        try:
            stored = await self.license_store.create(record)
        except StoreError as e:
            if e.kind == StoreErrorKind.CONDITION_FAILED:
                raise LicenseAlreadyExistsError() from e
            raise

        licenses_created_total.inc()
        logger.info(
            "License created",
            extra={"customer_name": stored.customer_name, "system_id": stored.system_id},
        )

        try:
            await self.notifier.notify(stored, REASON_CREATED)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error(
                "Could not queue credential notification: %s",
                e,
                extra={"system_id": stored.system_id},
                exc_info=True,
            )

        payload = stored.sealed_fields()
        return CreateLicenseResultDTO(
            license_data=stored.to_dict(),
            encrypted_payload=self.sealer.seal_verbose(payload, stored.password),
            sealed_payload=self.sealer.seal(payload, stored.password),
        )
