"""
License query handlers.

Handlers for the license listing and dashboard statistics queries.
"""
from datetime import date
from typing import Any, Dict, List

from licenses.application.queries.get_license_statistics import GetLicenseStatisticsQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.domain.services import LicenseStatistics
from licenses.ports.license_store import LicenseStore


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_store: LicenseStore):
        """Initialize handler with store."""
        self.license_store = license_store

    async def handle(self, query: ListLicensesQuery) -> List[Dict[str, Any]]:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            Every license as a mapping, without its activation password
        """
        records = await self.license_store.list_all()
        return [record.public_dict() for record in records]


class GetLicenseStatisticsHandler:
    """Handler for GetLicenseStatisticsQuery."""

    def __init__(self, license_store: LicenseStore):
        """Initialize handler with store."""
        self.license_store = license_store

    async def handle(self, query: GetLicenseStatisticsQuery) -> Dict[str, Any]:
        """
        Handle license statistics query.

        Args:
            query: GetLicenseStatisticsQuery

        Returns:
            Dashboard figures
        """
        records = await self.license_store.list_all()
        return LicenseStatistics.summarize(records, query.today or date.today())
