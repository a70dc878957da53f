"""
Django implementation of LicenseStore port.

This adapter converts between domain entities and Django ORM models
and reports database failures as StoreError.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from core.domain.exceptions import StoreError, StoreErrorKind
from core.domain.value_objects import LicenseState
from core.infrastructure.database import translate_database_errors
from licenses.domain.license import PATCHABLE_FIELDS, LicenseRecord
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_store import LicenseStore

UPDATABLE_COLUMNS = PATCHABLE_FIELDS + ("password",)
ACTIVATION_COLUMNS = ("state", "activated_date", "fe_mac", "be_mac")


class DjangoLicenseStore(LicenseStore):
    """
    Django ORM implementation of LicenseStore.

    Updates and activation lock the row, run the entity transition and save
    the result. A missing row is reported as CONDITION_FAILED.
    """

    def _to_domain(self, model: LicenseModel) -> LicenseRecord:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            LicenseRecord domain entity
        """
        return LicenseRecord(
            customer_name=model.customer_name,
            system_id=model.system_id,
            site_name=model.site_name,
            device_count=model.device_count,
            validity=model.validity,
            email=model.email,
            password=model.password,
            generated_date=model.generated_date,
            state=LicenseState(model.state),
            activated_date=model.activated_date,
            description=model.description,
            file_url=model.file_url,
            fe_mac=model.fe_mac,
            be_mac=model.be_mac,
        )

    def _to_model(self, record: LicenseRecord) -> LicenseModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            record: LicenseRecord domain entity

        Returns:
            Django License model
        """
        return LicenseModel(
            customer_name=record.customer_name,
            system_id=record.system_id,
            site_name=record.site_name,
            device_count=record.device_count,
            validity=record.validity,
            email=record.email,
            password=record.password,
            generated_date=record.generated_date,
            state=record.state.value,
            activated_date=record.activated_date,
            description=record.description,
            file_url=record.file_url,
            fe_mac=record.fe_mac,
            be_mac=record.be_mac,
        )

    @sync_to_async
    def create(self, record: LicenseRecord) -> LicenseRecord:
        """
        Persist a new record if its key pair is free.

        Args:
            record: Record to persist

        Returns:
            Persisted record
        """
        with translate_database_errors("create"):
            model = self._to_model(record)
            with transaction.atomic():
                model.save(force_insert=True)
            return self._to_domain(model)

    def _locked(self, **lookup) -> LicenseModel:
        model = LicenseModel.objects.select_for_update().filter(**lookup).first()
        if model is None:
            raise StoreError(
                StoreErrorKind.CONDITION_FAILED,
                "No license for " + "/".join(str(value) for value in lookup.values()),
            )
        return model

    @staticmethod
    def _write(model: LicenseModel, record: LicenseRecord, columns) -> None:
        for name in columns:
            value = getattr(record, name)
            setattr(model, name, value.value if isinstance(value, LicenseState) else value)
        model.save(update_fields=[*columns, "updated_at"])

    @sync_to_async
    def update(
        self, customer_name: str, system_id: str, changes: Dict[str, Any]
    ) -> LicenseRecord:
        """
        Patch an existing record through the entity and store the result.

        Args:
            customer_name: Customer part of the key
            system_id: System ID part of the key
            changes: Patchable field values, plus ``password`` when rotated

        Returns:
            Record as stored after the update

        Raises:
            StoreError: CONDITION_FAILED if the record does not exist,
                INVALID_REQUEST if the patch breaks an entity rule
        """
        patch = {name: value for name, value in changes.items() if name != "password"}
        with translate_database_errors("update"):
            with transaction.atomic():
                model = self._locked(customer_name=customer_name, system_id=system_id)
                current = self._to_domain(model)
                try:
                    updated = current.apply_patch(
                        patch, changes.get("password", current.password)
                    )
                except ValueError as e:
                    raise StoreError(StoreErrorKind.INVALID_REQUEST, str(e)) from e
                self._write(model, updated, UPDATABLE_COLUMNS)
            return updated

    @sync_to_async
    def delete(self, customer_name: str, system_id: str) -> None:
        """
        Delete an existing record.

        Args:
            customer_name: Customer part of the key
            system_id: System ID part of the key
        """
        with translate_database_errors("delete"):
            deleted, _ = LicenseModel.objects.filter(
                customer_name=customer_name, system_id=system_id
            ).delete()
            if not deleted:
                raise StoreError(
                    StoreErrorKind.CONDITION_FAILED,
                    f"No license for {customer_name}/{system_id}",
                )

    @sync_to_async
    def find_by_system_id(self, system_id: str) -> Optional[LicenseRecord]:
        """
        Find a record through the system ID index.

        Args:
            system_id: System ID

        Returns:
            LicenseRecord or None if not found
        """
        with translate_database_errors("find_by_system_id"):
            model = LicenseModel.objects.filter(system_id=system_id).first()
            return self._to_domain(model) if model else None

    @sync_to_async
    def find_by_customer(self, customer_name: str) -> List[LicenseRecord]:
        """Return every record of a customer."""
        with translate_database_errors("find_by_customer"):
            models = LicenseModel.objects.filter(customer_name=customer_name)
            return [self._to_domain(model) for model in models]

    @sync_to_async
    def count_for_customer(self, customer_name: str) -> int:
        """Return the number of records held by a customer."""
        with translate_database_errors("count_for_customer"):
            return LicenseModel.objects.filter(customer_name=customer_name).count()

    @sync_to_async
    def list_all(self) -> List[LicenseRecord]:
        """Return every record."""
        with translate_database_errors("list_all"):
            return [self._to_domain(model) for model in LicenseModel.objects.all()]

    @sync_to_async
    def activate(
        self, system_id: str, on_date: date, fe_mac: str = "", be_mac: str = ""
    ) -> LicenseRecord:
        """
        Move an INACTIVE record to ACTIVE.

        An ACTIVE record is returned unchanged.

        Args:
            system_id: System ID
            on_date: Activation date
            fe_mac: Front-end MAC address binding
            be_mac: Back-end MAC address binding

        Returns:
            Record as stored after the call
        """
        with translate_database_errors("activate"):
            with transaction.atomic():
                model = self._locked(system_id=system_id)
                current = self._to_domain(model)
                if current.is_active:
                    return current
                activated = current.activate(on_date, fe_mac, be_mac)
                self._write(model, activated, ACTIVATION_COLUMNS)
            return activated
