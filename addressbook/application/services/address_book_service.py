import logging
from typing import List, Optional

from ...domain.exceptions import StoreError
from ...domain.models import CONTACT_ADDED, Contact
from ...domain.ports.notifications import Notifier
from ...infrastructure.repositories.contact_repository import ContactRepository

logger = logging.getLogger(__name__)


class AddressBookService:
    """Contact management on top of the cache-aside repository."""

    def __init__(self, contact_repository: ContactRepository, notifier: Optional[Notifier] = None) -> None:
        self._contacts = contact_repository
        self._notifier = notifier

    def get_all_contacts(self) -> List[Contact]:
        return self._contacts.get_all()

    def get_contact_by_id(self, contact_id: int) -> Optional[Contact]:
        return self._contacts.get_by_id(contact_id)

    def add_contact(self, contact: Contact) -> Optional[Contact]:
        try:
            created = self._contacts.add(contact)
        except StoreError:
            logger.exception("Failed to add contact %s", contact.full_name)
            return None
        if self._notifier:
            self._notifier.publish(CONTACT_ADDED, created.to_dict())
        return created

    def update_contact(self, contact_id: int, contact: Contact) -> bool:
        return self._contacts.update(contact_id, contact)

    def delete_contact(self, contact_id: int) -> bool:
        return self._contacts.delete(contact_id)
