"""Delivery of insulin reminders to pet caretakers."""

import logging
from dataclasses import dataclass
from typing import Protocol

from diapets.adapters.push_transport import PushTransport
from diapets.domain.dosing import DuePet
from diapets.domain.notifications import (
    DeliveryResult,
    DispatchReport,
    LedgerKey,
    PetDispatchOutcome,
)
from diapets.domain.pets import Caretaker, PetRecord
from diapets.errors import PetDataUnavailable
from diapets.services.ledger import NotificationLedgerService

logger = logging.getLogger(__name__)

DEFAULT_TITLE_TEMPLATE = "{pet_name}: insulin!"
DEFAULT_BODY_TEMPLATE = "{pet_name} will need insulin soon."


class PetDirectory(Protocol):
    """Read interface for pets and the users caring for them."""

    def get_pet(self, pet_id: int) -> PetRecord | None:
        """Return a pet by id, if present."""

    def get_caretakers(self, pet_id: int) -> list[Caretaker]:
        """Return the caretakers of a pet with their push addresses."""


@dataclass(frozen=True)
class _Delivery:
    succeeded: int = 0
    failed: int = 0


@dataclass
class NotificationDispatcher:
    """Sends reminders for due pets and records them in the ledger."""

    directory: PetDirectory
    transport: PushTransport
    ledger_service: NotificationLedgerService
    title_template: str = DEFAULT_TITLE_TEMPLATE
    body_template: str = DEFAULT_BODY_TEMPLATE

    async def dispatch_due(
        self, due_pets: list[DuePet], lead_time_minutes: int
    ) -> DispatchReport:
        """Notify caretakers of each due pet; never raises for a single pet."""
        logger.info("Sending notifications to owners of %d pets", len(due_pets))
        outcomes = [
            await self._dispatch_pet(due_pet, lead_time_minutes)
            for due_pet in due_pets
        ]
        report = DispatchReport.from_outcomes(outcomes)
        logger.info(
            "Dispatch completed: %d recorded, %d failed, %d deliveries sent, "
            "%d deliveries failed",
            report.succeeded,
            report.failed,
            report.deliveries_succeeded,
            report.deliveries_failed,
        )
        return report

    async def _dispatch_pet(
        self, due_pet: DuePet, lead_time_minutes: int
    ) -> PetDispatchOutcome:
        pet: PetRecord | None = None
        caretakers: list[Caretaker] = []
        try:
            pet = self.directory.get_pet(due_pet.pet_id)
            if pet is not None:
                caretakers = self.directory.get_caretakers(due_pet.pet_id)
        except PetDataUnavailable as exc:
            logger.warning(
                "Could not load pet_id=%s for dispatch: %s", due_pet.pet_id, exc
            )
            pet = None
        except Exception:
            logger.exception("Pet lookup failed for pet_id=%s", due_pet.pet_id)
            pet = None

        delivery = _Delivery()
        if pet is None:
            logger.warning(
                "Pet %s is unavailable; recording reminder without delivery",
                due_pet.pet_id,
            )
        else:
            addresses = _collect_addresses(caretakers)
            logger.debug(
                "Collected %d push tokens for pet %s", len(addresses), pet.name
            )
            if addresses:
                delivery = await self._deliver(pet, addresses)
            else:
                logger.info(
                    "Pet %s (id=%s) has no reachable caretakers; skipping delivery",
                    pet.name,
                    pet.id,
                )

        key = LedgerKey(
            pet_id=due_pet.pet_id,
            lead_time_minutes=lead_time_minutes,
            record_id=due_pet.record_id,
        )
        try:
            newly_recorded = self.ledger_service.record_dispatch(key)
        except Exception as exc:
            logger.exception("Failed to record reminder for pet_id=%s", key.pet_id)
            return PetDispatchOutcome(
                pet_id=due_pet.pet_id,
                record_id=due_pet.record_id,
                pet_found=pet is not None,
                deliveries_succeeded=delivery.succeeded,
                deliveries_failed=delivery.failed,
                ledger_written=False,
                newly_recorded=False,
                error=str(exc),
            )
        return PetDispatchOutcome(
            pet_id=due_pet.pet_id,
            record_id=due_pet.record_id,
            pet_found=pet is not None,
            deliveries_succeeded=delivery.succeeded,
            deliveries_failed=delivery.failed,
            ledger_written=True,
            newly_recorded=newly_recorded,
        )

    async def _deliver(self, pet: PetRecord, addresses: list[str]) -> _Delivery:
        title = self.title_template.format(pet_name=pet.name)
        body = self.body_template.format(pet_name=pet.name)
        logger.info(
            "Sending push notifications for pet: %s to %d devices",
            pet.name,
            len(addresses),
        )
        try:
            results = await self.transport.send(addresses, title, body)
        except Exception:
            logger.exception("Push transport failed for pet %s", pet.name)
            return _Delivery(failed=len(addresses))
        return _count(results)


def _collect_addresses(caretakers: list[Caretaker]) -> list[str]:
    seen: set[str] = set()
    addresses: list[str] = []
    for caretaker in caretakers:
        for address in caretaker.push_addresses:
            if address and address not in seen:
                seen.add(address)
                addresses.append(address)
    return addresses


def _count(results: list[DeliveryResult]) -> _Delivery:
    succeeded = sum(1 for result in results if result.delivered)
    return _Delivery(succeeded=succeeded, failed=len(results) - succeeded)
