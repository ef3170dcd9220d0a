"""Notification ledger: which reminders have already been sent."""

import logging
from dataclasses import dataclass
from typing import Protocol

from diapets.domain.dosing import DuePet
from diapets.domain.notifications import LedgerKey

logger = logging.getLogger(__name__)


class NotificationLedgerRepository(Protocol):
    """Persistence interface for sent reminder entries."""

    def exists(self, key: LedgerKey) -> bool:
        """Return whether an entry exists for the key."""

    def find_existing(self, keys: list[LedgerKey]) -> set[LedgerKey]:
        """Return the subset of keys that already have an entry."""

    def insert_if_absent(self, key: LedgerKey) -> bool:
        """Insert an entry unless present; return True if newly inserted.

        Raises LedgerWriteFailure when storage rejects the write for any
        reason other than the entry already existing.
        """


@dataclass
class NotificationLedgerService:
    """Service that deduplicates reminders against the ledger."""

    repository: NotificationLedgerRepository

    def already_notified(self, key: LedgerKey) -> bool:
        """Return whether a reminder was sent for this due event."""
        return self.repository.exists(key)

    def filter_unnotified(
        self, lead_time_minutes: int, due_pets: list[DuePet]
    ) -> list[DuePet]:
        """Drop pets that were already notified for their current application."""
        if not due_pets:
            return []
        keys = {
            pet: LedgerKey(
                pet_id=pet.pet_id,
                lead_time_minutes=lead_time_minutes,
                record_id=pet.record_id,
            )
            for pet in due_pets
        }
        existing = self.repository.find_existing(list(keys.values()))
        pending = [pet for pet, key in keys.items() if key not in existing]
        if existing:
            logger.debug(
                "Skipping %d pets already notified at lead time %d",
                len(due_pets) - len(pending),
                lead_time_minutes,
            )
        return pending

    def record_dispatch(self, key: LedgerKey) -> bool:
        """Persist a ledger entry; return False when it already existed."""
        inserted = self.repository.insert_if_absent(key)
        if inserted:
            logger.info(
                "Recorded reminder: pet_id=%s lead_time=%s record_id=%s",
                key.pet_id,
                key.lead_time_minutes,
                key.record_id,
            )
        else:
            logger.info(
                "Reminder already recorded by a concurrent run: pet_id=%s "
                "lead_time=%s record_id=%s",
                key.pet_id,
                key.lead_time_minutes,
                key.record_id,
            )
        return inserted
