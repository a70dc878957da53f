"""
Unit tests for CredentialStore.
"""
from dataclasses import replace

import pytest
from django.contrib.auth.hashers import check_password

from core.domain.exceptions import StoreError, StoreErrorKind


@pytest.mark.asyncio
class TestCredentialStore:
    """Tests for CredentialStore."""

    async def test_bootstrap_creates_admin(self, credential_store, secret_vault, settings):
        """Test a missing secret is created with the default administrator."""
        admin = await credential_store.get_user("admin")

        assert list(secret_vault.secrets["test-credentials"]) == ["admin"]
        assert admin.role.value == "admin"
        assert check_password(settings.DEFAULT_ADMIN["PASSWORD"], admin.password)
        assert "test-credentials" in secret_vault.secrets

    async def test_bootstrap_keeps_existing_secret(self, credential_store, secret_vault):
        """Test bootstrap never overwrites an existing secret."""
        secret_vault.secrets["test-credentials"] = {
            "bob": {"username": "bob", "password": "x", "role": "user"}
        }

        users = await credential_store.bootstrap()

        assert list(users) == ["bob"]

    async def test_cached_reads(self, credential_store, secret_vault):
        """Test reads are served from the cache."""
        await credential_store.get_user("admin")
        reads = secret_vault.reads
        await credential_store.get_user("admin")
        await credential_store.get_user("nobody")
        assert secret_vault.reads == reads

    async def test_unknown_user(self, credential_store):
        """Test unknown users return None."""
        assert await credential_store.get_user("nobody") is None

    async def test_save_user_writes_and_invalidates(self, credential_store, secret_vault):
        """Test saving writes the whole set back and drops the cache."""
        admin = await credential_store.get_user("admin")

        await credential_store.save_user(replace(admin, phone="555"))

        assert secret_vault.secrets["test-credentials"]["admin"]["phone"] == "555"
        assert (await credential_store.get_user("admin")).phone == "555"

    async def test_vault_error_propagates(self, credential_store, secret_vault):
        """Test vault failures surface as StoreError."""

        async def broken(name):
            raise StoreError(StoreErrorKind.UNAVAILABLE, "vault down")

        secret_vault.get_secret = broken
        with pytest.raises(StoreError):
            await credential_store.get_user("admin")
