"""Supabase implementation of the pet and caretaker directory."""

from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from diapets.domain.pets import Caretaker, PetRecord
from diapets.errors import PetDataUnavailable
from diapets.services.dispatcher import PetDirectory


@dataclass
class SupabasePetDirectory(PetDirectory):
    """Reads pets, ownership and push tokens from Supabase."""

    client: Client

    def get_pet(self, pet_id: int) -> PetRecord | None:
        """Return a pet by id, if present."""
        try:
            response = (
                self.client.table("pets")
                .select("id, name, insulin_frequency")
                .eq("id", pet_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise PetDataUnavailable(f"Failed to load pet {pet_id}: {exc}") from exc
        if not response.data:
            return None
        row = response.data[0]
        return PetRecord(
            id=int(row["id"]),
            name=str(row.get("name") or ""),
            dosing_frequency_hours=int(row["insulin_frequency"]),
        )

    def get_caretakers(self, pet_id: int) -> list[Caretaker]:
        """Return the owners and caretakers of a pet with their push tokens."""
        try:
            owners_response = (
                self.client.table("pet_owners")
                .select("owner_id")
                .eq("pet_id", pet_id)
                .execute()
            )
            owner_ids = [int(row["owner_id"]) for row in owners_response.data or []]
            if not owner_ids:
                return []
            tokens_response = (
                self.client.table("push_tokens")
                .select("user_id, token")
                .in_("user_id", owner_ids)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise PetDataUnavailable(
                f"Failed to load caretakers of pet {pet_id}: {exc}"
            ) from exc

        tokens: dict[int, list[str]] = {owner_id: [] for owner_id in owner_ids}
        for row in tokens_response.data or []:
            token = row.get("token")
            if token:
                tokens.setdefault(int(row["user_id"]), []).append(str(token))
        return [
            Caretaker(user_id=owner_id, push_addresses=tuple(addresses))
            for owner_id, addresses in tokens.items()
        ]
