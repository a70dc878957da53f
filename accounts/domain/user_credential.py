"""
User credential domain entity.
"""
from dataclasses import dataclass
from typing import Any, Dict

from core.domain.value_objects import UserRole


@dataclass(frozen=True)
class UserCredential:
    """
    Operator account as stored in the credential secret.

    The password field always holds a hash, never the plain password.
    """

    username: str
    password: str
    role: UserRole
    email: str = ""
    phone: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserCredential":
        """Build an entity from its stored mapping."""
        return cls(
            username=data["username"],
            password=data["password"],
            role=UserRole(data.get("role", UserRole.USER.value)),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            created_at=data.get("createdAt", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the stored mapping of the entity."""
        return {
            "username": self.username,
            "password": self.password,
            "role": self.role.value,
            "email": self.email,
            "phone": self.phone,
            "createdAt": self.created_at,
        }

    def public_profile(self) -> Dict[str, Any]:
        """Return the profile returned to clients on sign-in."""
        return {
            "username": self.username,
            "role": self.role.value,
            "email": self.email,
            "phone": self.phone,
        }
