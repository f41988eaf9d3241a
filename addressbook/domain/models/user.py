"""User domain model for account authentication and password reset."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(slots=True)
class User:
    """
    User account entity.

    Attributes:
        id: Unique identifier (None until persisted)
        name: Display name
        email: Login key (unique)
        password_hash: bcrypt hash of the password, never the plaintext
        role: Authorization role
        reset_token: Pending password reset token
        reset_token_expires_at: Absolute expiry of the pending reset token
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    name: str
    email: str
    password_hash: str
    role: str = "User"
    id: Optional[int] = None
    reset_token: Optional[str] = None
    reset_token_expires_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def set_reset_token(self, token: str, expires_at: datetime) -> None:
        self.reset_token = token
        self.reset_token_expires_at = expires_at

    def clear_reset_token(self) -> None:
        self.reset_token = None
        self.reset_token_expires_at = None

    def to_profile(self) -> "UserProfile":
        return UserProfile(name=self.name, email=self.email, role=self.role)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role}>"


@dataclass(slots=True)
class UserProfile:
    """Public projection of a user; never carries the password hash."""

    name: str
    email: str
    role: str
