"""
Credential store service.

Reads the operator credential set from the secret vault, caches it for a
short time and writes changes back as a whole.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from django.conf import settings
from django.contrib.auth.hashers import make_password

from accounts.domain.user_credential import UserCredential
from accounts.ports.secret_vault import SecretVault
from core.domain.value_objects import UserRole
from core.infrastructure.cache import CachePort

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "auth:credentials:"


class CredentialStore:
    """
    Cached view of the operator credential set.

    Writes are last-writer-wins on the whole set; concurrent password
    changes for different users can overwrite each other.
    """

    def __init__(
        self,
        vault: SecretVault,
        cache: CachePort,
        secret_name: Optional[str] = None,
        cache_ttl: Optional[int] = None,
    ):
        """
        Initialize store.

        Args:
            vault: Secret vault holding the credential set
            cache: Cache port for the in-process copy
            secret_name: Secret name (CREDENTIALS_SECRET_NAME by default)
            cache_ttl: Cache lifetime in seconds (CREDENTIALS_CACHE_TTL by default)
        """
        self.vault = vault
        self.cache = cache
        self.secret_name = secret_name or getattr(
            settings, "CREDENTIALS_SECRET_NAME", "licensing-user-credentials"
        )
        self.cache_ttl = cache_ttl if cache_ttl is not None else getattr(
            settings, "CREDENTIALS_CACHE_TTL", 60
        )

    @property
    def _cache_key(self) -> str:
        return f"{CACHE_KEY_PREFIX}{self.secret_name}"

    @staticmethod
    def default_admin() -> UserCredential:
        """Build the bootstrap administrator from settings."""
        admin = getattr(settings, "DEFAULT_ADMIN", {})
        return UserCredential(
            username=admin.get("USERNAME", "admin"),
            password=make_password(admin.get("PASSWORD", "admin123")),
            role=UserRole.ADMIN,
            email=admin.get("EMAIL", ""),
            phone=admin.get("PHONE", ""),
            created_at=datetime.now(timezone.utc).isoformat(),
        )

    async def bootstrap(self) -> Dict[str, dict]:
        """
        Create the credential secret with the default administrator.

        Does nothing when the secret already exists.

        Returns:
            The credential set as stored
        """
        admin = self.default_admin()
        users = {admin.username: admin.to_dict()}
        created = await self.vault.create_secret(
            self.secret_name, users, description="Operator credentials for the licensing service"
        )
        if created:
            logger.warning(
                "Credential secret %s created with default administrator %s",
                self.secret_name,
                admin.username,
            )
            return users
        return await self.vault.get_secret(self.secret_name) or {}

    async def _load_raw(self) -> Dict[str, dict]:
        cached = await self.cache.get(self._cache_key)
        if cached is not None:
            return cached

        users = await self.vault.get_secret(self.secret_name)
        if users is None:
            users = await self.bootstrap()
        await self.cache.set(self._cache_key, users, timeout=self.cache_ttl)
        return users

    async def get_user(self, username: str) -> Optional[UserCredential]:
        """Return one user, or None if unknown."""
        users = await self._load_raw()
        data = users.get(username)
        return UserCredential.from_dict(data) if data else None

    async def save_user(self, user: UserCredential) -> None:
        """
        Write one user back to the vault and drop the cached copy.

        Args:
            user: User to store

        Raises:
            StoreError: If the vault write fails or the cached copy cannot be
                dropped; in the latter case the old hash may still be served
        """
        users = await self.vault.get_secret(self.secret_name)
        if users is None:
            users = await self.bootstrap()
        users = dict(users)
        users[user.username] = user.to_dict()
        await self.vault.put_secret(self.secret_name, users)
        await self.invalidate()

    async def invalidate(self) -> None:
        """Drop the cached credential set."""
        await self.cache.delete(self._cache_key)
