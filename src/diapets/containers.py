"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diapets.adapters.firebase_push_transport import FirebasePushTransport
from diapets.adapters.push_transport import PushTransport
from diapets.adapters.supabase_dosing_repository import SupabaseDosingRepository
from diapets.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from diapets.adapters.supabase_pet_directory import SupabasePetDirectory
from diapets.config import Settings
from diapets.services.dispatcher import NotificationDispatcher
from diapets.services.due_pets import DuePetSelector
from diapets.services.ledger import NotificationLedgerService
from diapets.services.schedule import PetScheduleService
from diapets.services.scheduler import InsulinReminderScheduler, ReminderPolicy


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    push_transport: PushTransport
    ledger_service: NotificationLedgerService
    selector: DuePetSelector
    dispatcher: NotificationDispatcher
    scheduler: InsulinReminderScheduler
    schedule_service: PetScheduleService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    dosing_repository = SupabaseDosingRepository(supabase_client)
    ledger_repository = SupabaseLedgerRepository(supabase_client)
    pet_directory = SupabasePetDirectory(supabase_client)
    push_transport = FirebasePushTransport.create(
        credentials_path=resolved_settings.fcm_credentials_path,
        project_id=resolved_settings.fcm_project_id,
        timeout_seconds=resolved_settings.push_timeout_seconds,
    )
    ledger_service = NotificationLedgerService(ledger_repository)
    selector = DuePetSelector(
        dosing_repository=dosing_repository,
        ledger_service=ledger_service,
    )
    dispatcher = NotificationDispatcher(
        directory=pet_directory,
        transport=push_transport,
        ledger_service=ledger_service,
        title_template=resolved_settings.notification_title_template,
        body_template=resolved_settings.notification_body_template,
    )
    scheduler = InsulinReminderScheduler(
        selector=selector,
        dispatcher=dispatcher,
        policy=ReminderPolicy.from_settings(resolved_settings),
    )
    schedule_service = PetScheduleService(
        directory=pet_directory,
        dosing_repository=dosing_repository,
    )

    async def close_resources() -> None:
        await push_transport.close()

    return AppContainer(
        settings=resolved_settings,
        push_transport=push_transport,
        ledger_service=ledger_service,
        selector=selector,
        dispatcher=dispatcher,
        scheduler=scheduler,
        schedule_service=schedule_service,
        close_resources=close_resources,
    )
