"""
License domain services.

Domain services contain business logic that doesn't naturally fit
in a single entity.
"""
import secrets
import string
from collections import Counter
from datetime import date, timedelta
from typing import Any, Dict, Iterable

from licenses.domain.license import LicenseRecord

SYMBOLS = "!@#$%^&*()_+[]{}|;:,.<>?"


class PasswordGenerator:
    """Generates one-time activation passwords."""

    def __init__(self, length: int = 12, alphabet: str = None):
        """
        Initialize generator.

        Args:
            length: Password length
            alphabet: Character pool (letters, digits and symbols by default)
        """
        if alphabet is None:
            alphabet = string.ascii_lowercase + string.ascii_uppercase + string.digits + SYMBOLS
        if not alphabet:
            raise ValueError("Password alphabet cannot be empty")
        if length < 1:
            raise ValueError("Password length must be at least 1")
        self.length = length
        self.alphabet = alphabet

    def generate(self) -> str:
        """Return a new password drawn with a CSPRNG."""
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))


class SystemIdFormatter:
    """
    Derives system identifiers.

    Layout: PREFIX_CUST_SITE{SEQ}_{MM}{YYYY}{DEVICE_COUNT}, for example
    CFS30_ACM_NOCS3_0520245.
    """

    def __init__(self, prefix: str = "CFS30"):
        """Initialize formatter with the product prefix."""
        self.prefix = prefix

    @staticmethod
    def sequence_token(sequence: int) -> str:
        """
        Render the per-customer sequence number.

        Args:
            sequence: 1-based sequence number

        Returns:
            CS{n} below 10, C{n} below 100, the bare number otherwise
        """
        if sequence < 1:
            raise ValueError("Sequence must be at least 1")
        if sequence < 10:
            return f"CS{sequence}"
        if sequence < 100:
            return f"C{sequence}"
        return str(sequence)

    def format(
        self,
        customer_name: str,
        site_name: str,
        device_count: int,
        sequence: int,
        on_date: date,
    ) -> str:
        """
        Build a system ID.

        Args:
            customer_name: Customer name (first 3 characters are used)
            site_name: Site name (first 2 characters are used)
            device_count: Number of devices
            sequence: 1-based sequence of the license for this customer
            on_date: Issue date

        Returns:
            System ID string
        """
        customer_part = customer_name[:3].upper()
        site_part = site_name[:2].upper()
        return (
            f"{self.prefix}_{customer_part}_{site_part}{self.sequence_token(sequence)}"
            f"_{on_date.month:02d}{on_date.year}{device_count}"
        )


class LicenseStatistics:
    """Aggregates dashboard figures over all license records."""

    TOP_CUSTOMERS = 5
    RECENT_DAYS = 30

    @classmethod
    def summarize(cls, records: Iterable[LicenseRecord], today: date) -> Dict[str, Any]:
        """
        Summarize license records.

        Args:
            records: All license records
            today: Reference date for expiry and recency

        Returns:
            Mapping of dashboard figures
        """
        records = list(records)
        recent_cutoff = today - timedelta(days=cls.RECENT_DAYS)
        active = [record for record in records if record.is_active]
        per_customer = Counter(record.customer_name for record in records)

        return {
            "totalLicenses": len(records),
            "activeLicenses": len(active),
            "inactiveLicenses": len(records) - len(active),
            "expiredLicenses": sum(1 for record in active if record.is_expired(today)),
            "activatedLast30Days": sum(
                1 for record in active if record.activated_date >= recent_cutoff
            ),
            "top5Customers": [
                {"customer": customer, "count": count}
                for customer, count in per_customer.most_common(cls.TOP_CUSTOMERS)
            ],
            "totalCustomers": len(per_customer),
        }
