"""
License domain entity.

This is the core domain entity representing an issued license.
It contains business logic and is independent of infrastructure.
"""
import calendar
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Dict, Optional

from core.domain.value_objects import Email, LicenseState

# Fields a client may change on update; the key pair and activation
# fields are not patchable.
PATCHABLE_FIELDS = (
    "site_name",
    "device_count",
    "validity",
    "email",
    "description",
    "file_url",
)

# Fields removed from the activation response.
ACTIVATION_HIDDEN_FIELDS = (
    "password",
    "validity",
    "activated_date",
    "generated_date",
    "state",
    "email",
)

# Fields sealed into the payload handed to the client.
SEALED_FIELDS = (
    "customer_name",
    "system_id",
    "site_name",
    "device_count",
    "validity",
    "email",
    "generated_date",
)


def add_months(start: date, months: int) -> date:
    """
    Add calendar months to a date, clamping to the last day of the month.

    Args:
        start: Start date
        months: Number of months to add

    Returns:
        Shifted date
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


@dataclass(frozen=True)
class LicenseRecord:
    """
    License domain entity.

    Identified by (customer_name, system_id). The key pair never changes,
    the state only moves from INACTIVE to ACTIVE and activated_date is set
    exactly once.
    """

    customer_name: str
    system_id: str
    site_name: str
    device_count: int
    validity: int
    email: str
    password: str
    generated_date: date
    state: LicenseState = LicenseState.INACTIVE
    activated_date: Optional[date] = None
    description: str = ""
    file_url: str = ""
    fe_mac: str = ""
    be_mac: str = ""

    def __post_init__(self):
        """Validate license entity."""
        if not self.customer_name:
            raise ValueError("Customer name is required")
        if not self.system_id:
            raise ValueError("System ID is required")
        if self.device_count < 1:
            raise ValueError("Device count must be at least 1")
        if self.validity < 1:
            raise ValueError("Validity must be at least 1 month")
        Email(self.email)

    @classmethod
    def create(
        cls,
        customer_name: str,
        system_id: str,
        site_name: str,
        device_count: int,
        validity: int,
        email: str,
        password: str,
        generated_date: date,
        description: str = "",
        file_url: str = "",
    ) -> "LicenseRecord":
        """
        Create a new, not yet activated license.

        Args:
            customer_name: Customer the license is issued to
            system_id: Derived system identifier
            site_name: Site the license covers
            device_count: Number of devices covered
            validity: Validity in months, counted from activation
            email: Recipient of the credentials
            password: One-time activation password
            generated_date: Issue date
            description: Free text description
            file_url: Optional attachment link

        Returns:
            LicenseRecord in INACTIVE state
        """
        return cls(
            customer_name=customer_name,
            system_id=system_id,
            site_name=site_name,
            device_count=device_count,
            validity=validity,
            email=email,
            password=password,
            generated_date=generated_date,
            state=LicenseState.INACTIVE,
            activated_date=None,
            description=description or "",
            file_url=file_url or "",
        )

    @property
    def is_active(self) -> bool:
        """Return True once the license has been activated."""
        return self.state == LicenseState.ACTIVE

    def valid_till(self) -> Optional[date]:
        """Return the end of validity, or None before activation."""
        if self.activated_date is None:
            return None
        return add_months(self.activated_date, self.validity)

    def is_expired(self, today: date) -> bool:
        """
        Check whether an activated license has run past its validity.

        Args:
            today: Reference date

        Returns:
            True if activated and the validity period has ended
        """
        end = self.valid_till()
        return end is not None and end < today

    def apply_patch(self, changes: Dict[str, Any], new_password: str) -> "LicenseRecord":
        """
        Create a new instance with patched fields and a rotated password.

        Args:
            changes: Field values to change (only patchable fields)
            new_password: Replacement activation password

        Returns:
            New LicenseRecord instance
        """
        unknown = set(changes) - set(PATCHABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        return replace(self, password=new_password, **changes)

    def activate(self, on_date: date, fe_mac: str = "", be_mac: str = "") -> "LicenseRecord":
        """
        Create a new activated instance.

        Args:
            on_date: Activation date
            fe_mac: Front-end MAC address binding
            be_mac: Back-end MAC address binding

        Returns:
            New LicenseRecord in ACTIVE state
        """
        if self.is_active:
            raise ValueError("License is already active")
        return replace(
            self,
            state=LicenseState.ACTIVE,
            activated_date=on_date,
            fe_mac=fe_mac or "",
            be_mac=be_mac or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly mapping of the record."""
        data = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, LicenseState):
                value = value.value
            elif isinstance(value, date):
                value = value.isoformat()
            data[field.name] = value
        return data

    def sealed_fields(self) -> Dict[str, Any]:
        """Return the subset of fields sealed into the client payload."""
        data = self.to_dict()
        return {name: data[name] for name in SEALED_FIELDS}

    def public_dict(self) -> Dict[str, Any]:
        """Return the record without its activation password."""
        data = self.to_dict()
        data.pop("password")
        return data

    def activation_view(self) -> Dict[str, Any]:
        """Return the activation response projection with valid_till."""
        data = self.to_dict()
        for name in ACTIVATION_HIDDEN_FIELDS:
            data.pop(name, None)
        end = self.valid_till()
        data["valid_till"] = end.isoformat() if end else None
        return data
