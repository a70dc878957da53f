"""
Django management command to create the operator credential secret.

Creates the secret with the default administrator when it does not
exist yet; an existing secret is left untouched.
"""

import asyncio
import logging

from django.core.management.base import BaseCommand

from accounts.application.services.credential_store import CredentialStore
from accounts.infrastructure.repositories.django_secret_vault import DjangoSecretVault
from core.infrastructure.cache_adapters import strict_cache_adapter

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to bootstrap operator credentials."""

    help = "Create the operator credential secret with the default administrator"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--secret-name",
            type=str,
            default=None,
            help="Secret name (default: CREDENTIALS_SECRET_NAME)",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        store = CredentialStore(
            DjangoSecretVault(), strict_cache_adapter, secret_name=options["secret_name"]
        )
        users = asyncio.run(self._bootstrap(store))

        # pylint: disable=no-member
        self.stdout.write(
            self.style.SUCCESS(
                f"Credential secret '{store.secret_name}' holds {len(users)} user(s): "
                + ", ".join(sorted(users))
            )
        )

    async def _bootstrap(self, store: CredentialStore) -> dict:
        users = await store.bootstrap()
        await store.invalidate()
        return users
