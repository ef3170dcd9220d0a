"""Supabase repository for insulin application history."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from diapets.domain.dosing import DosingAnchor
from diapets.services.due_pets import DosingRecordRepository

LATEST_APPLICATIONS_VIEW = "latest_insulin_applications"
PAGE_SIZE = 1000
ANCHOR_COLUMNS = "pet_id, insulin_frequency, insulin_application_id, application_time"


@dataclass
class SupabaseDosingRepository(DosingRecordRepository):
    """Reads latest applications from the latest_insulin_applications view."""

    client: Client
    page_size: int = PAGE_SIZE

    def latest_dosing_record(self, pet_id: int) -> DosingAnchor | None:
        """Return the latest application of a pet, if any."""
        response = (
            self.client.table(LATEST_APPLICATIONS_VIEW)
            .select(ANCHOR_COLUMNS)
            .eq("pet_id", pet_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_anchor(response.data[0])

    def list_latest_dosing_records(self) -> list[DosingAnchor]:
        """Return the latest application of every pet, page by page."""
        anchors: list[DosingAnchor] = []
        start = 0
        while True:
            response = (
                self.client.table(LATEST_APPLICATIONS_VIEW)
                .select(ANCHOR_COLUMNS)
                .order("pet_id", desc=False)
                .range(start, start + self.page_size - 1)
                .execute()
            )
            rows = response.data or []
            anchors.extend(_parse_anchor(row) for row in rows)
            if len(rows) < self.page_size:
                return anchors
            start += self.page_size


def _parse_anchor(row: dict[str, object]) -> DosingAnchor:
    return DosingAnchor(
        pet_id=int(row["pet_id"]),
        dosing_frequency_hours=int(row["insulin_frequency"]),
        record_id=int(row["insulin_application_id"]),
        applied_at=_parse_timestamp(str(row["application_time"])),
    )


def _parse_timestamp(raw: str) -> datetime:
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed
