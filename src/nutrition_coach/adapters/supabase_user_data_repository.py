"""Supabase repository for the user data document."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_coach.services.user_data import UserDataRepository


@dataclass
class SupabaseUserDataRepository(UserDataRepository):
    """Supabase implementation storing one JSON document per key."""

    client: Client
    table_name: str = "app_state"

    def load(self, key: str) -> dict[str, object] | None:
        """Return the stored document for a key, if present."""
        response = (
            self.client.table(self.table_name)
            .select("key, data")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        document = response.data[0].get("data")
        if isinstance(document, dict):
            return document
        return None

    def save(self, key: str, document: dict[str, object]) -> None:
        """Insert or replace the document for a key."""
        response = (
            self.client.table(self.table_name)
            .upsert(
                {
                    "key": key,
                    "data": document,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="key",
            )
            .execute()
        )
        if response.data is None:
            raise RuntimeError("Failed to save user data")
