"""Domain models for accounts and the package catalog."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class UserRecord:
    """Represents a customer account stored in the database."""

    id: int
    email: str
    name: str | None = None


@dataclass(frozen=True)
class AddressRecord:
    """Shipping address owned by a user."""

    id: int
    user_id: int
    alias: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str


@dataclass(frozen=True)
class PackageRecord:
    """Catalog entry for a printable photo package."""

    id: int
    name: str
    unit_price: Decimal
    photos_per_unit: int
