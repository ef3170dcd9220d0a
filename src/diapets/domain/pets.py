"""Domain models for pets and their caretakers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PetRecord:
    """Represents a pet stored in the database."""

    id: int
    name: str
    dosing_frequency_hours: int


@dataclass(frozen=True)
class Caretaker:
    """A user responsible for a pet, with their registered push addresses."""

    user_id: int
    push_addresses: tuple[str, ...] = ()
