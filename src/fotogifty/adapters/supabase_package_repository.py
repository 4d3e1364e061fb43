"""Supabase-backed package catalog."""

from dataclasses import dataclass
from decimal import Decimal

from supabase import Client

from fotogifty.domain.models import PackageRecord
from fotogifty.services.checkout import PackageRepository


@dataclass
class SupabasePackageRepository(PackageRepository):
    """Read-only catalog lookups against the packages table."""

    client: Client

    def get_package(self, package_id: int) -> PackageRecord | None:
        """Return a package by id, if present."""
        response = (
            self.client.table("packages")
            .select("id, name, price, photo_count")
            .eq("id", package_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return PackageRecord(
            id=int(row["id"]),
            name=row["name"],
            unit_price=Decimal(str(row["price"])),
            photos_per_unit=int(row["photo_count"]),
        )
