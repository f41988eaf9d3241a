from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import Contact, User


class ContactStore(Protocol):
    """Durable storage for address book contacts."""

    def list_contacts(self) -> List[Contact]:
        ...

    def get_contact(self, contact_id: int) -> Optional[Contact]:
        ...

    def insert_contact(self, contact: Contact) -> Contact:
        ...

    def update_contact(self, contact: Contact) -> None:
        ...

    def delete_contact(self, contact_id: int) -> None:
        ...


class UserStore(Protocol):
    """Durable storage for user accounts."""

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_reset_token(self, token: str) -> Optional[User]:
        ...

    def insert_user(self, user: User) -> User:
        ...

    def update_user(self, user: User) -> None:
        ...


class PersistenceGateway(ContactStore, UserStore, Protocol):
    """Aggregate persistence interface consumed by the application container."""

    def close(self) -> None:
        ...
