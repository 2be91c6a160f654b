"""
Business logic for address book contacts.

The service is a thin pass-through to the configured contact store.
Adding a contact also announces it on the ``contact_added`` queue.
"""

import logging
from typing import List, Optional

from ..repositories.contact_repository import ContactRepository
from ..schemas.contact import Contact, ContactCreate
from .notification_service import CONTACT_ADDED, NotificationPublisher


logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, repository: ContactRepository, publisher: Optional[NotificationPublisher] = None) -> None:
        self.repository = repository
        self.publisher = publisher

    def get_all_contacts(self) -> List[Contact]:
        return self.repository.get_all()

    def get_contact_by_id(self, contact_id: int) -> Optional[Contact]:
        return self.repository.get_by_id(contact_id)

    def add_contact(self, contact: ContactCreate) -> Contact:
        stored = self.repository.add(contact)
        logger.info("Added contact %s", stored.id)
        if self.publisher is not None:
            self.publisher.publish(CONTACT_ADDED, stored.model_dump())
        return stored

    def update_contact(self, contact_id: int, contact: ContactCreate) -> bool:
        updated = self.repository.update(contact_id, contact)
        if updated:
            logger.info("Updated contact %s", contact_id)
        return updated

    def delete_contact(self, contact_id: int) -> bool:
        deleted = self.repository.delete(contact_id)
        if deleted:
            logger.info("Deleted contact %s", contact_id)
        return deleted
