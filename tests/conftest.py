"""
Pytest configuration and shared fixtures.
"""

import copy
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pytest
from django.core.cache import cache

from accounts.application.services.credential_store import CredentialStore
from accounts.application.services.token_blacklist import TokenBlacklist
from accounts.application.services.token_service import TokenService
from accounts.infrastructure.repositories.django_secret_vault import DjangoSecretVault
from accounts.ports.secret_vault import SecretVault
from core.domain.exceptions import StoreError, StoreErrorKind
from core.infrastructure.cache import CachePort
from licenses.application.services.duplicate_guard import DuplicateGuard
from licenses.domain.license import LicenseRecord
from licenses.domain.payload_sealer import PayloadSealer
from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore
from licenses.ports.license_notifier import LicenseNotifier
from licenses.ports.license_store import LicenseStore


class InMemoryCache(CachePort):
    """
    Dict-backed cache; timeouts are ignored.

    ``break_for`` makes chosen operations on keys with a prefix raise
    StoreError(UNAVAILABLE), the way the strict Django adapter does.
    """

    def __init__(self):
        self.data: Dict[str, Any] = {}
        self.broken: Optional[tuple] = None

    def break_for(self, prefix: str, operations=("get", "set", "add", "delete")) -> None:
        self.broken = (prefix, set(operations))

    def _check(self, operation: str, key: str) -> None:
        if self.broken is None:
            return
        prefix, operations = self.broken
        if operation in operations and key.startswith(prefix):
            raise StoreError(StoreErrorKind.UNAVAILABLE, f"cache {operation} {key}")

    async def get(self, key: str) -> Optional[Any]:
        self._check("get", key)
        return self.data.get(key)

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        self._check("set", key)
        self.data[key] = value

    async def add(self, key: str, value: Any, timeout: Optional[int] = None) -> bool:
        self._check("add", key)
        if key in self.data:
            return False
        self.data[key] = value
        return True

    async def delete(self, key: str) -> None:
        self._check("delete", key)
        self.data.pop(key, None)

    async def clear(self) -> None:
        self.data.clear()


class InMemoryLicenseStore(LicenseStore):
    """LicenseStore keeping records in a dict keyed by (customer_name, system_id)."""

    def __init__(self):
        self.records: Dict[tuple, LicenseRecord] = {}
        self.fail_with: Optional[StoreErrorKind] = None

    def _check(self):
        if self.fail_with is not None:
            raise StoreError(self.fail_with, "injected failure")

    def _missing(self, customer_name, system_id):
        return StoreError(StoreErrorKind.CONDITION_FAILED, f"{customer_name}/{system_id}")

    async def create(self, record: LicenseRecord) -> LicenseRecord:
        self._check()
        key = (record.customer_name, record.system_id)
        if key in self.records or any(r.system_id == record.system_id for r in self.records.values()):
            raise StoreError(StoreErrorKind.CONDITION_FAILED, "exists")
        self.records[key] = record
        return record

    async def update(self, customer_name: str, system_id: str, changes: Dict[str, Any]):
        self._check()
        key = (customer_name, system_id)
        if key not in self.records:
            raise self._missing(customer_name, system_id)
        password = changes.get("password", self.records[key].password)
        patch = {name: value for name, value in changes.items() if name != "password"}
        try:
            self.records[key] = self.records[key].apply_patch(patch, password)
        except ValueError as e:
            raise StoreError(StoreErrorKind.INVALID_REQUEST, str(e)) from e
        return self.records[key]

    async def delete(self, customer_name: str, system_id: str) -> None:
        self._check()
        if self.records.pop((customer_name, system_id), None) is None:
            raise self._missing(customer_name, system_id)

    async def find_by_system_id(self, system_id: str) -> Optional[LicenseRecord]:
        self._check()
        for record in self.records.values():
            if record.system_id == system_id:
                return record
        return None

    async def find_by_customer(self, customer_name: str) -> List[LicenseRecord]:
        self._check()
        return [r for r in self.records.values() if r.customer_name == customer_name]

    async def count_for_customer(self, customer_name: str) -> int:
        return len(await self.find_by_customer(customer_name))

    async def list_all(self) -> List[LicenseRecord]:
        self._check()
        return list(self.records.values())

    async def activate(self, system_id, on_date, fe_mac="", be_mac=""):
        self._check()
        record = await self.find_by_system_id(system_id)
        if record is None:
            raise StoreError(StoreErrorKind.CONDITION_FAILED, system_id)
        if record.is_active:
            return record
        activated = record.activate(on_date, fe_mac, be_mac)
        self.records[(record.customer_name, record.system_id)] = activated
        return activated


class RecordingNotifier(LicenseNotifier):
    """Notifier remembering every call; optionally failing."""

    def __init__(self, fail: bool = False):
        self.calls: List[tuple] = []
        self.fail = fail

    async def notify(self, record: LicenseRecord, reason: str) -> None:
        self.calls.append((record, reason))
        if self.fail:
            raise ConnectionError("broker unreachable")


class InMemorySecretVault(SecretVault):
    """SecretVault keeping deep copies of secrets in a dict."""

    def __init__(self):
        self.secrets: Dict[str, dict] = {}
        self.reads = 0

    async def get_secret(self, name: str) -> Optional[Dict[str, Any]]:
        self.reads += 1
        value = self.secrets.get(name)
        return copy.deepcopy(value) if value is not None else None

    async def create_secret(self, name: str, value: Dict[str, Any], description: str = "") -> bool:
        if name in self.secrets:
            return False
        self.secrets[name] = copy.deepcopy(value)
        return True

    async def put_secret(self, name: str, value: Dict[str, Any]) -> None:
        if name not in self.secrets:
            raise StoreError(StoreErrorKind.MISSING_RESOURCE, name)
        self.secrets[name] = copy.deepcopy(value)


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def clear_django_cache():
    """Start every test with an empty Django cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def memory_cache():
    """Fixture for an in-memory CachePort."""
    return InMemoryCache()


@pytest.fixture
def license_store():
    """Fixture for an in-memory LicenseStore."""
    return InMemoryLicenseStore()


@pytest.fixture
def notifier():
    """Fixture for a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    """Fixture for a notifier whose broker is unreachable."""
    return RecordingNotifier(fail=True)


@pytest.fixture
def clock():
    """Fixture for a manual clock."""
    return FakeClock()


@pytest.fixture
def duplicate_guard(memory_cache, clock):
    """Fixture for a DuplicateGuard over the in-memory cache."""
    return DuplicateGuard(memory_cache, window_seconds=10, clock=clock)


@pytest.fixture
def sealer():
    """Fixture for a PayloadSealer with a low iteration count."""
    return PayloadSealer(iterations=1000)


@pytest.fixture
def secret_vault():
    """Fixture for an in-memory SecretVault."""
    return InMemorySecretVault()


@pytest.fixture
def credential_store(secret_vault, memory_cache):
    """Fixture for a CredentialStore over in-memory collaborators."""
    return CredentialStore(secret_vault, memory_cache, secret_name="test-credentials", cache_ttl=60)


@pytest.fixture
def token_service():
    """Fixture for a TokenService with a fixed key."""
    return TokenService(
        signing_key="unit-test-key",
        algorithm="HS256",
        access_lifetime=timedelta(hours=24),
        refresh_lifetime=timedelta(days=7),
    )


@pytest.fixture
def token_blacklist(memory_cache):
    """Fixture for a TokenBlacklist over the in-memory cache."""
    return TokenBlacklist(memory_cache)


@pytest.fixture
def sample_record():
    """Fixture for an inactive license record."""
    return LicenseRecord.create(
        customer_name="Acme",
        system_id="CFS30_ACM_NOCS1_0520245",
        site_name="North",
        device_count=5,
        validity=3,
        email="ops@acme.example",
        password="S3cret!pass#",
        generated_date=date(2024, 5, 1),
    )


@pytest.fixture
def django_license_store(db):
    """Fixture for the Django LicenseStore."""
    return DjangoLicenseStore()


@pytest.fixture
def django_secret_vault(db):
    """Fixture for the Django SecretVault."""
    return DjangoSecretVault()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
