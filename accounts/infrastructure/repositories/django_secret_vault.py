"""
Django implementation of SecretVault port.
"""
import logging
from typing import Any, Dict, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from accounts.infrastructure.models import StoredSecret
from accounts.ports.secret_vault import SecretVault
from core.domain.exceptions import StoreError, StoreErrorKind
from core.infrastructure.database import translate_database_errors

logger = logging.getLogger(__name__)


class DjangoSecretVault(SecretVault):
    """Keeps secrets in the StoredSecret table."""

    @sync_to_async
    def get_secret(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Read a secret.

        Args:
            name: Secret name

        Returns:
            Secret value or None if the secret does not exist
        """
        with translate_database_errors("get_secret"):
            secret = StoredSecret.objects.filter(name=name).first()
            return secret.value if secret else None

    @sync_to_async
    def create_secret(self, name: str, value: Dict[str, Any], description: str = "") -> bool:
        """
        Create a secret if it does not exist.

        Args:
            name: Secret name
            value: Secret value
            description: Human-readable description

        Returns:
            True if created, False if it already existed
        """
        with translate_database_errors("create_secret"):
            try:
                with transaction.atomic():
                    StoredSecret.objects.create(name=name, value=value, description=description)
            except IntegrityError:
                logger.info("Secret %s already exists", name)
                return False
            logger.info("Secret %s created", name)
            return True

    @sync_to_async
    def put_secret(self, name: str, value: Dict[str, Any]) -> None:
        """
        Replace the value of an existing secret.

        Args:
            name: Secret name
            value: New secret value
        """
        with translate_database_errors("put_secret"):
            secret = StoredSecret.objects.filter(name=name).first()
            if secret is None:
                raise StoreError(StoreErrorKind.MISSING_RESOURCE, f"Secret {name} does not exist")
            secret.value = value
            secret.save(update_fields=["value", "updated_at"])
