# src/taskdesk/accounts/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

ADMIN_USERNAME: Final = "Admin_00"
DEFAULT_ADMIN_EMAIL: Final = "admin@system.com"
DEFAULT_ADMIN_PASSWORD: Final = "admin123"

MIN_USERNAME_LENGTH: Final = 3
MIN_PASSWORD_LENGTH: Final = 6


class UiMode(StrEnum):
    """The two mutually exclusive presentation modes; the session is the switch."""

    AUTH = "auth"
    APPLICATION = "application"


@dataclass(frozen=True, slots=True)
class Identity:
    """Session projection of a credential record (no password)."""

    username: str
    email: str

    def to_dict(self) -> dict[str, str]:
        return {"username": self.username, "email": self.email}

    @classmethod
    def from_dict(cls, raw: Any) -> Identity | None:
        if not isinstance(raw, dict):
            return None
        username = raw.get("username")
        email = raw.get("email")
        if not isinstance(username, str) or not isinstance(email, str):
            return None
        return cls(username=username, email=email)


@dataclass(slots=True)
class CredentialRecord:
    username: str
    email: str
    # Stored verbatim (plaintext).
    password: str

    def identity(self) -> Identity:
        return Identity(username=self.username, email=self.email)

    def to_dict(self) -> dict[str, str]:
        return {"username": self.username, "email": self.email, "password": self.password}

    @classmethod
    def from_dict(cls, raw: Any) -> CredentialRecord:
        """Strict parse; raises ValueError for anything but a full record."""
        if not isinstance(raw, dict):
            raise ValueError(f"credential record must be an object, got {type(raw).__name__}")
        fields = {}
        for name in ("username", "email", "password"):
            value = raw.get(name)
            if not isinstance(value, str):
                raise ValueError(f"credential record field {name!r} missing or not a string")
            fields[name] = value
        return cls(**fields)


def is_admin_identity(identity: Identity | None) -> bool:
    return identity is not None and identity.username == ADMIN_USERNAME
