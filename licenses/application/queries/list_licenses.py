"""
ListLicensesQuery.
"""

from dataclasses import dataclass


@dataclass
class ListLicensesQuery:
    """Query to list every license without activation passwords."""
