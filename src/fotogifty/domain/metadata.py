"""Schema for the order snapshot carried in checkout session metadata."""

import json
from collections.abc import Mapping
from decimal import Decimal

from pydantic import BaseModel, Field, ValidationError

from fotogifty.domain.orders import CartItem
from fotogifty.errors import MetadataError

METADATA_VERSION = 1
# Provider metadata values are limited to 500 characters each.
_VALUE_LIMIT = 500
_ITEMS_KEY = "items_json"
_ITEMS_PARTS_KEY = "items_json_parts"


class MetadataItem(BaseModel):
    """Cart line as frozen at checkout time."""

    package_id: int
    package_name: str
    category: str | None = None
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(gt=0)
    photos_required: int = Field(ge=0)


class SessionMetadata(BaseModel):
    """Everything needed to rebuild an order once payment completes."""

    version: int = METADATA_VERSION
    user_id: int
    address_id: int
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str | None = None
    items: list[MetadataItem] = Field(min_length=1)
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    @classmethod
    def from_cart_items(
        cls, items: list[CartItem], **fields: object
    ) -> "SessionMetadata":
        """Build metadata from domain cart lines."""
        return cls(
            items=[
                MetadataItem(
                    package_id=item.package_id,
                    package_name=item.package_name,
                    category=item.category,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    photos_required=item.photos_required,
                )
                for item in items
            ],
            **fields,
        )

    def cart_items(self) -> list[CartItem]:
        return [
            CartItem(
                package_id=item.package_id,
                package_name=item.package_name,
                category=item.category,
                unit_price=item.unit_price,
                quantity=item.quantity,
                photos_required=item.photos_required,
            )
            for item in self.items
        ]

    def to_provider_metadata(self) -> dict[str, str]:
        """Flatten into the string-valued mapping the provider stores."""
        metadata = {
            "version": str(self.version),
            "user_id": str(self.user_id),
            "address_id": str(self.address_id),
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
        }
        if self.customer_phone:
            metadata["customer_phone"] = self.customer_phone
        items_json = json.dumps(
            [item.model_dump(mode="json") for item in self.items],
            separators=(",", ":"),
        )
        if len(items_json) <= _VALUE_LIMIT:
            metadata[_ITEMS_KEY] = items_json
            return metadata
        parts = [
            items_json[start : start + _VALUE_LIMIT]
            for start in range(0, len(items_json), _VALUE_LIMIT)
        ]
        metadata[_ITEMS_PARTS_KEY] = str(len(parts))
        for index, part in enumerate(parts):
            metadata[f"{_ITEMS_KEY}_{index}"] = part
        return metadata

    @classmethod
    def from_provider_metadata(
        cls, metadata: Mapping[str, object] | None
    ) -> "SessionMetadata":
        """Validate provider metadata and rebuild the snapshot.

        Raises MetadataError with code METADATA_MISSING when there is no
        metadata at all, and METADATA_INVALID when any field fails validation.
        """
        if not metadata:
            raise MetadataError("Session has no metadata", code="METADATA_MISSING")
        try:
            items = json.loads(_join_items(metadata))
            return cls.model_validate(
                {
                    "version": metadata.get("version") or METADATA_VERSION,
                    "user_id": metadata.get("user_id"),
                    "address_id": metadata.get("address_id"),
                    "customer_name": metadata.get("customer_name") or "",
                    "customer_email": metadata.get("customer_email") or "",
                    "customer_phone": metadata.get("customer_phone") or None,
                    "items": items,
                    "subtotal": metadata.get("subtotal"),
                    "tax": metadata.get("tax"),
                    "total": metadata.get("total"),
                }
            )
        except (ValueError, ValidationError) as exc:
            raise MetadataError(
                f"Session metadata is invalid: {exc}", code="METADATA_INVALID"
            ) from exc


def _join_items(metadata: Mapping[str, object]) -> str:
    raw_parts = metadata.get(_ITEMS_PARTS_KEY)
    if raw_parts is None:
        value = metadata.get(_ITEMS_KEY)
        if not isinstance(value, str):
            raise ValueError("items_json is missing")
        return value
    count = int(str(raw_parts))
    chunks = []
    for index in range(count):
        chunk = metadata.get(f"{_ITEMS_KEY}_{index}")
        if not isinstance(chunk, str):
            raise ValueError(f"items_json_{index} is missing")
        chunks.append(chunk)
    return "".join(chunks)
