"""
License store port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer and report failures
as StoreError with a StoreErrorKind.
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, List, Optional

from licenses.domain.license import LicenseRecord


class LicenseStore(ABC):
    """
    Abstract store for LicenseRecord entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def create(self, record: LicenseRecord) -> LicenseRecord:
        """
        Persist a new record if its key pair is free.

        Args:
            record: Record to persist

        Returns:
            Persisted record

        Raises:
            StoreError: CONDITION_FAILED if the key pair already exists
        """
        pass

    @abstractmethod
    async def update(
        self, customer_name: str, system_id: str, changes: Dict[str, Any]
    ) -> LicenseRecord:
        """
        Update fields of an existing record.

        Args:
            customer_name: Customer part of the key
            system_id: System ID part of the key
            changes: Field values to write

        Returns:
            Record as stored after the update

        Raises:
            StoreError: CONDITION_FAILED if the record does not exist
        """
        pass

    @abstractmethod
    async def delete(self, customer_name: str, system_id: str) -> None:
        """
        Delete an existing record.

        Raises:
            StoreError: CONDITION_FAILED if the record does not exist
        """
        pass

    @abstractmethod
    async def find_by_system_id(self, system_id: str) -> Optional[LicenseRecord]:
        """
        Find a record through the system ID index.

        Args:
            system_id: System ID

        Returns:
            LicenseRecord or None if not found
        """
        pass

    @abstractmethod
    async def find_by_customer(self, customer_name: str) -> List[LicenseRecord]:
        """Return every record of a customer."""
        pass

    @abstractmethod
    async def count_for_customer(self, customer_name: str) -> int:
        """Return the number of records held by a customer."""
        pass

    @abstractmethod
    async def list_all(self) -> List[LicenseRecord]:
        """Return every record."""
        pass

    @abstractmethod
    async def activate(
        self, system_id: str, on_date: date, fe_mac: str = "", be_mac: str = ""
    ) -> LicenseRecord:
        """
        Move an INACTIVE record to ACTIVE.

        The write only applies while the record is still INACTIVE; an
        already active record is returned unchanged.

        Args:
            system_id: System ID
            on_date: Activation date
            fe_mac: Front-end MAC address binding
            be_mac: Back-end MAC address binding

        Returns:
            Record as stored after the call

        Raises:
            StoreError: CONDITION_FAILED if the record does not exist
        """
        pass
