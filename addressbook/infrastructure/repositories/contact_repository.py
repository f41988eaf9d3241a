"""Repository for Contact persistence with cache-aside reads."""

import json
import logging
from datetime import timedelta
from typing import List, Optional

from ...domain.models import Contact
from ...domain.ports.cache import CacheBackend
from ...domain.ports.persistence import ContactStore

logger = logging.getLogger(__name__)

ALL_CONTACTS_KEY = "AddressBook_AllContacts"


def contact_cache_key(contact_id: int) -> str:
    return f"AddressBook_Contact_{contact_id}"


class ContactRepository:
    """Serves contact reads from the cache when fresh and invalidates on every write.

    The cache is a disposable projection of the store: writes never update
    cached values, they only delete the keys they affect. Cache failures are
    logged and treated as misses so that correctness never depends on the
    cache being reachable.
    """

    def __init__(
        self,
        store: ContactStore,
        cache: CacheBackend,
        cache_ttl: timedelta = timedelta(minutes=10),
    ) -> None:
        self._store = store
        self._cache = cache
        self._ttl_seconds = int(cache_ttl.total_seconds())

    def get_all(self) -> List[Contact]:
        """
        Get every contact.

        Returns:
            Cached snapshot when present, otherwise a fresh store read
            that is then written to the cache.
        """
        cached = self._read_cache(ALL_CONTACTS_KEY)
        if cached is not None:
            try:
                return [Contact.from_dict(item) for item in cached]
            except (AttributeError, KeyError, TypeError) as exc:
                logger.warning("Discarding malformed cache entry %s: %s", ALL_CONTACTS_KEY, exc)

        contacts = self._store.list_contacts()
        self._write_cache(ALL_CONTACTS_KEY, [contact.to_dict() for contact in contacts])
        return contacts

    def get_by_id(self, contact_id: int) -> Optional[Contact]:
        """
        Get a contact by ID.

        Args:
            contact_id: Contact ID

        Returns:
            Contact if found, None otherwise. Misses are never cached.
        """
        key = contact_cache_key(contact_id)
        cached = self._read_cache(key)
        if cached is not None:
            try:
                return Contact.from_dict(cached)
            except (AttributeError, KeyError, TypeError) as exc:
                logger.warning("Discarding malformed cache entry %s: %s", key, exc)

        contact = self._store.get_contact(contact_id)
        if contact is not None:
            self._write_cache(key, contact.to_dict())
        return contact

    def add(self, contact: Contact) -> Contact:
        """Insert a contact and drop the collection snapshot."""
        created = self._store.insert_contact(contact)
        self._invalidate(ALL_CONTACTS_KEY)
        return created

    def update(self, contact_id: int, contact: Contact) -> bool:
        """
        Overwrite all fields of an existing contact.

        Args:
            contact_id: Contact ID
            contact: New field values (its id is ignored)

        Returns:
            True if updated, False if no contact has that ID
        """
        existing = self._store.get_contact(contact_id)
        if existing is None:
            return False

        existing.full_name = contact.full_name
        existing.address = contact.address
        existing.city = contact.city
        existing.state = contact.state
        existing.zip_code = contact.zip_code
        existing.phone_number = contact.phone_number
        self._store.update_contact(existing)

        self._invalidate(ALL_CONTACTS_KEY, contact_cache_key(contact_id))
        return True

    def delete(self, contact_id: int) -> bool:
        """
        Delete a contact.

        Args:
            contact_id: Contact ID

        Returns:
            True if deleted, False if no contact has that ID
        """
        existing = self._store.get_contact(contact_id)
        if existing is None:
            return False

        self._store.delete_contact(contact_id)
        self._invalidate(ALL_CONTACTS_KEY, contact_cache_key(contact_id))
        return True

    # Cache helpers ----------------------------------------------------------
    def _read_cache(self, key: str):
        try:
            raw = self._cache.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s; falling back to store: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None

    def _write_cache(self, key: str, value: object) -> None:
        try:
            self._cache.set(key, json.dumps(value, ensure_ascii=False), self._ttl_seconds)
        except Exception as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)

    def _invalidate(self, *keys: str) -> None:
        for key in keys:
            try:
                self._cache.delete(key)
            except Exception as exc:
                logger.warning("Cache invalidation failed for %s: %s", key, exc)
