"""Selection of pets whose next insulin dose is coming due."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from diapets.domain.dosing import DosingAnchor, DuePet
from diapets.errors import InvalidArgument
from diapets.services.ledger import NotificationLedgerService

logger = logging.getLogger(__name__)


class DosingRecordRepository(Protocol):
    """Read interface for insulin application history."""

    def latest_dosing_record(self, pet_id: int) -> DosingAnchor | None:
        """Return the latest application of a pet, if it has any."""

    def list_latest_dosing_records(self) -> list[DosingAnchor]:
        """Return the latest application of every pet that has one."""


@dataclass(frozen=True)
class ElapsedRange:
    """Range of time since the last dose, lower bound inclusive, upper exclusive.

    Bounds are whole minutes; elapsed time is compared without rounding.
    """

    lower_minutes: int | None = None
    upper_minutes: int | None = None

    def contains(self, elapsed: timedelta) -> bool:
        """Return whether the elapsed time falls inside the range."""
        if self.lower_minutes is not None and elapsed < timedelta(
            minutes=self.lower_minutes
        ):
            return False
        if self.upper_minutes is not None and elapsed >= timedelta(
            minutes=self.upper_minutes
        ):
            return False
        return True


@dataclass(frozen=True)
class DueCriteria:
    """Which pets count as due for a reminder."""

    lead_time_minutes: int
    include_overdue: bool = False
    excluded_pet_ids: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        lead_time = self.lead_time_minutes
        if isinstance(lead_time, bool) or not isinstance(lead_time, int):
            raise InvalidArgument(
                f"lead_time_minutes must be an integer, got {lead_time!r}"
            )
        if lead_time < 0:
            raise InvalidArgument(
                f"lead_time_minutes must not be negative, got {lead_time}"
            )

    @classmethod
    def build(
        cls,
        lead_time_minutes: int,
        include_overdue: bool = False,
        excluded_pet_ids: Iterable[int] | None = None,
    ) -> "DueCriteria":
        """Create criteria, treating a missing exclusion list as empty."""
        return cls(
            lead_time_minutes=lead_time_minutes,
            include_overdue=bool(include_overdue),
            excluded_pet_ids=frozenset(excluded_pet_ids or ()),
        )

    def window_for(self, anchor: DosingAnchor) -> ElapsedRange:
        """Return the elapsed-time range that makes this pet due."""
        period = anchor.period_minutes
        return ElapsedRange(
            lower_minutes=period - self.lead_time_minutes,
            upper_minutes=None if self.include_overdue else period,
        )

    def matches(self, anchor: DosingAnchor, now: datetime) -> bool:
        """Return whether the pet is due, ignoring the ledger."""
        if anchor.pet_id in self.excluded_pet_ids:
            return False
        return self.window_for(anchor).contains(anchor.elapsed(now))

    def summary(self) -> str:
        """Human-readable summary for logs."""
        parts = [
            f"lead_time_minutes={self.lead_time_minutes}",
            f"include_overdue={self.include_overdue}",
        ]
        if self.excluded_pet_ids:
            parts.append(f"excluded_pets={len(self.excluded_pet_ids)}")
        return ", ".join(parts)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DuePetSelector:
    """Finds pets that need a reminder and have not been notified yet."""

    dosing_repository: DosingRecordRepository
    ledger_service: NotificationLedgerService
    clock: Callable[[], datetime] = field(default=_utc_now)

    def select_due_pets(
        self,
        lead_time_minutes: int,
        include_overdue: bool = False,
        excluded_pet_ids: Iterable[int] | None = None,
    ) -> list[DuePet]:
        """Return pets due within the lead time, as an unordered collection."""
        criteria = DueCriteria.build(
            lead_time_minutes, include_overdue, excluded_pet_ids
        )
        return self.select(criteria)

    def select(self, criteria: DueCriteria) -> list[DuePet]:
        """Return pets matching the criteria and absent from the ledger."""
        logger.info("Finding pets needing insulin: %s", criteria.summary())
        now = self.clock()
        anchors = self.dosing_repository.list_latest_dosing_records()
        candidates = [
            DuePet(pet_id=anchor.pet_id, record_id=anchor.record_id)
            for anchor in anchors
            if criteria.matches(anchor, now)
        ]
        due = self.ledger_service.filter_unnotified(
            criteria.lead_time_minutes, candidates
        )
        logger.info(
            "Found %d pets needing insulin (%d scanned, %d in window)",
            len(due),
            len(anchors),
            len(candidates),
        )
        return due
