"""Domain models for insulin dosing history."""

from dataclasses import dataclass
from datetime import datetime, timedelta

MINUTES_PER_HOUR = 60


@dataclass(frozen=True)
class DosingAnchor:
    """Latest insulin application of a pet, joined with its dosing frequency.

    One anchor is computed per pet per selection pass; pets without any
    application have no anchor.
    """

    pet_id: int
    dosing_frequency_hours: int
    record_id: int
    applied_at: datetime

    @property
    def period_minutes(self) -> int:
        """Minutes between two required doses."""
        return self.dosing_frequency_hours * MINUTES_PER_HOUR

    @property
    def next_due_at(self) -> datetime:
        """Theoretical time of the next dose."""
        return self.applied_at + timedelta(hours=self.dosing_frequency_hours)

    def elapsed(self, now: datetime) -> timedelta:
        """Time since the latest application, at full precision."""
        return now - self.applied_at


@dataclass(frozen=True)
class DuePet:
    """A pet selected for a reminder, with the application it refers to."""

    pet_id: int
    record_id: int


@dataclass(frozen=True)
class PetSchedule:
    """Last and next insulin application for a pet."""

    pet_id: int
    pet_name: str
    dosing_frequency_hours: int
    last_record_id: int | None
    last_applied_at: datetime | None
    next_due_at: datetime | None
    overdue: bool
