"""Domain models for reminder notifications."""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class LedgerKey:
    """Deduplication key of a sent reminder."""

    pet_id: int
    lead_time_minutes: int
    record_id: int


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a push delivery to a single address."""

    address: str
    delivered: bool
    error: str | None = None


@dataclass(frozen=True)
class PetDispatchOutcome:
    """What happened while dispatching a reminder for one pet."""

    pet_id: int
    record_id: int
    pet_found: bool
    deliveries_succeeded: int
    deliveries_failed: int
    ledger_written: bool
    newly_recorded: bool
    error: str | None = None


@dataclass(frozen=True)
class DispatchReport:
    """Summary of a dispatch batch."""

    succeeded: int = 0
    failed: int = 0
    deliveries_succeeded: int = 0
    deliveries_failed: int = 0
    outcomes: tuple[PetDispatchOutcome, ...] = field(default_factory=tuple)

    @classmethod
    def from_outcomes(cls, outcomes: list[PetDispatchOutcome]) -> "DispatchReport":
        """Aggregate per-pet outcomes into a report."""
        written = sum(1 for outcome in outcomes if outcome.ledger_written)
        return cls(
            succeeded=written,
            failed=len(outcomes) - written,
            deliveries_succeeded=sum(o.deliveries_succeeded for o in outcomes),
            deliveries_failed=sum(o.deliveries_failed for o in outcomes),
            outcomes=tuple(outcomes),
        )

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serialisable representation."""
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "deliveries_succeeded": self.deliveries_succeeded,
            "deliveries_failed": self.deliveries_failed,
            "outcomes": [asdict(outcome) for outcome in self.outcomes],
        }
