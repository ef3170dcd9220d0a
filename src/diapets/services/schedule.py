"""Per-pet insulin schedule lookups."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from diapets.domain.dosing import PetSchedule
from diapets.services.dispatcher import PetDirectory
from diapets.services.due_pets import DosingRecordRepository


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class PetScheduleService:
    """Computes when a pet last received insulin and when it is next due."""

    directory: PetDirectory
    dosing_repository: DosingRecordRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_schedule(self, pet_id: int) -> PetSchedule | None:
        """Return the schedule of a pet, or None if the pet does not exist."""
        pet = self.directory.get_pet(pet_id)
        if pet is None:
            return None
        latest = self.dosing_repository.latest_dosing_record(pet_id)
        if latest is None:
            return PetSchedule(
                pet_id=pet.id,
                pet_name=pet.name,
                dosing_frequency_hours=pet.dosing_frequency_hours,
                last_record_id=None,
                last_applied_at=None,
                next_due_at=None,
                overdue=False,
            )
        next_due_at = latest.next_due_at
        return PetSchedule(
            pet_id=pet.id,
            pet_name=pet.name,
            dosing_frequency_hours=pet.dosing_frequency_hours,
            last_record_id=latest.record_id,
            last_applied_at=latest.applied_at,
            next_due_at=next_due_at,
            overdue=self.clock() >= next_due_at,
        )
