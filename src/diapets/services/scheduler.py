"""Periodic insulin reminder run."""

import logging
from dataclasses import dataclass, field

from diapets.config import Settings, parse_pet_ids
from diapets.domain.notifications import DispatchReport
from diapets.services.dispatcher import NotificationDispatcher
from diapets.services.due_pets import DueCriteria, DuePetSelector

DEFAULT_LEAD_TIME_MINUTES = 15


@dataclass(frozen=True)
class ReminderPolicy:
    """Selection policy applied on every scheduled run."""

    lead_time_minutes: int = DEFAULT_LEAD_TIME_MINUTES
    include_overdue: bool = False
    excluded_pet_ids: frozenset[int] = frozenset()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReminderPolicy":
        """Build the policy from application settings."""
        return cls(
            lead_time_minutes=settings.reminder_lead_time_minutes,
            include_overdue=settings.reminder_include_overdue,
            excluded_pet_ids=parse_pet_ids(settings.reminder_excluded_pet_ids),
        )

    def criteria(self) -> DueCriteria:
        """Return the selector criteria for this policy."""
        return DueCriteria(
            lead_time_minutes=self.lead_time_minutes,
            include_overdue=self.include_overdue,
            excluded_pet_ids=self.excluded_pet_ids,
        )


@dataclass
class InsulinReminderScheduler:
    """Selects due pets and dispatches their reminders in one pass."""

    selector: DuePetSelector
    dispatcher: NotificationDispatcher
    policy: ReminderPolicy = field(default_factory=ReminderPolicy)
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(__name__)
    )

    async def run_once(self) -> DispatchReport:
        """Run a reminder pass; selection errors propagate to the caller."""
        self.logger.info("Starting insulin notification process")
        due_pets = self.selector.select(self.policy.criteria())
        if not due_pets:
            self.logger.info("No pets found needing insulin notifications")
            return DispatchReport()

        report = await self.dispatcher.dispatch_due(
            due_pets, self.policy.lead_time_minutes
        )
        self.logger.info(
            "Insulin notification process completed for %d pets", len(due_pets)
        )
        return report
