"""Supabase-backed address repository."""

from dataclasses import dataclass

from supabase import Client

from fotogifty.domain.models import AddressRecord
from fotogifty.services.checkout import AddressRepository


@dataclass
class SupabaseAddressRepository(AddressRepository):
    """Supabase implementation for shipping address lookups."""

    client: Client

    def get_address(self, address_id: int) -> AddressRecord | None:
        """Return an address by id, if present."""
        response = (
            self.client.table("addresses")
            .select("id, user_id, alias, street, city, state, postal_code, country")
            .eq("id", address_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return AddressRecord(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            alias=row.get("alias") or "",
            street=row.get("street") or "",
            city=row.get("city") or "",
            state=row.get("state") or "",
            postal_code=row.get("postal_code") or "",
            country=row.get("country") or "",
        )
