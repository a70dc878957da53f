"""
GetLicenseStatisticsQuery.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class GetLicenseStatisticsQuery:
    """Query for dashboard statistics over all licenses."""

    today: Optional[date] = None  # Defaults to the current date
