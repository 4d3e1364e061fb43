"""Supabase-backed user repository."""

from dataclasses import dataclass

from supabase import Client

from fotogifty.domain.models import UserRecord
from fotogifty.services.checkout import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user lookups."""

    client: Client

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user with the given id, if present."""
        response = (
            self.client.table("users")
            .select("id, email, name")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            row = response.data[0]
            return UserRecord(
                id=int(row["id"]), email=row["email"], name=row.get("name")
            )
        return None
