"""Supabase repository for the sent notification ledger."""

import logging
from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from diapets.domain.notifications import LedgerKey
from diapets.errors import LedgerWriteFailure
from diapets.services.ledger import NotificationLedgerRepository

LEDGER_TABLE = "sent_notifications"
LEDGER_CONFLICT_COLUMNS = "pet_id,minutes_alarm,last_insulin_id"
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
LOOKUP_CHUNK_SIZE = 200

logger = logging.getLogger(__name__)


@dataclass
class SupabaseLedgerRepository(NotificationLedgerRepository):
    """Ledger backed by a table with a unique (pet, lead time, record) key."""

    client: Client

    def exists(self, key: LedgerKey) -> bool:
        """Return whether an entry exists for the key."""
        response = (
            self.client.table(LEDGER_TABLE)
            .select("id")
            .eq("pet_id", key.pet_id)
            .eq("minutes_alarm", key.lead_time_minutes)
            .eq("last_insulin_id", key.record_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def find_existing(self, keys: list[LedgerKey]) -> set[LedgerKey]:
        """Return keys with an entry, querying by lead time in chunks."""
        wanted = set(keys)
        existing: set[LedgerKey] = set()
        by_lead_time: dict[int, list[int]] = {}
        for key in wanted:
            by_lead_time.setdefault(key.lead_time_minutes, []).append(key.record_id)

        for lead_time, record_ids in by_lead_time.items():
            ordered = sorted(set(record_ids))
            for start in range(0, len(ordered), LOOKUP_CHUNK_SIZE):
                chunk = ordered[start : start + LOOKUP_CHUNK_SIZE]
                response = (
                    self.client.table(LEDGER_TABLE)
                    .select("pet_id, minutes_alarm, last_insulin_id")
                    .eq("minutes_alarm", lead_time)
                    .in_("last_insulin_id", chunk)
                    .execute()
                )
                for row in response.data or []:
                    found = LedgerKey(
                        pet_id=int(row["pet_id"]),
                        lead_time_minutes=int(row["minutes_alarm"]),
                        record_id=int(row["last_insulin_id"]),
                    )
                    if found in wanted:
                        existing.add(found)
        return existing

    def insert_if_absent(self, key: LedgerKey) -> bool:
        """Insert the entry, treating a conflicting row as already present.

        A foreign-key violation means the pet or dosing record was deleted
        after selection; there is nothing left to deduplicate, so it is
        reported as not inserted rather than as a failure.
        """
        payload = {
            "pet_id": key.pet_id,
            "minutes_alarm": key.lead_time_minutes,
            "last_insulin_id": key.record_id,
        }
        try:
            response = (
                self.client.table(LEDGER_TABLE)
                .upsert(
                    payload,
                    on_conflict=LEDGER_CONFLICT_COLUMNS,
                    ignore_duplicates=True,
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                return False
            if exc.code == FOREIGN_KEY_VIOLATION:
                # Pet or dosing record deleted since selection.
                logger.warning(
                    "Skipping reminder record for pet_id=%s record_id=%s: "
                    "pet or dosing record no longer exists",
                    key.pet_id,
                    key.record_id,
                )
                return False
            raise LedgerWriteFailure(
                f"Failed to record notification for pet {key.pet_id}: {exc.message}"
            ) from exc
        except httpx.HTTPError as exc:
            raise LedgerWriteFailure(
                f"Failed to record notification for pet {key.pet_id}: {exc}"
            ) from exc
        return bool(response.data)
