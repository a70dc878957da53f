"""
Secret vault port (interface).

Stores named JSON secrets. Implementations report failures as StoreError.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SecretVault(ABC):
    """Abstract vault of named secrets."""

    @abstractmethod
    async def get_secret(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Read a secret.

        Args:
            name: Secret name

        Returns:
            Secret value or None if the secret does not exist
        """
        pass

    @abstractmethod
    async def create_secret(self, name: str, value: Dict[str, Any], description: str = "") -> bool:
        """
        Create a secret if it does not exist.

        Args:
            name: Secret name
            value: Secret value
            description: Human-readable description

        Returns:
            True if created, False if a secret with this name already existed
        """
        pass

    @abstractmethod
    async def put_secret(self, name: str, value: Dict[str, Any]) -> None:
        """
        Replace the value of an existing secret.

        Raises:
            StoreError: MISSING_RESOURCE if the secret does not exist
        """
        pass
