"""Supabase repository for orders."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from postgrest.exceptions import APIError
from supabase import Client

from fotogifty.domain.orders import (
    CartItem,
    NewOrder,
    Order,
    OrderStatus,
    PaymentStatus,
)
from fotogifty.errors import DuplicateOrderError
from fotogifty.services.orders import OrderRepository

logger = logging.getLogger(__name__)

_UNIQUE_VIOLATION = "23505"
_ORDER_COLUMNS = (
    "id, user_id, address_id, stripe_payment_intent_id, stripe_session_id, "
    "customer_name, customer_email, customer_phone, ordered_at, status, "
    "payment_status, subtotal, tax, total, "
    "order_items(package_id, package_name, package_category, unit_price, "
    "quantity, photos_required), "
    "order_photos(storage_path)"
)


@dataclass
class SupabaseOrderRepository(OrderRepository):
    """Supabase implementation for orders.

    `orders.stripe_session_id` is expected to carry a unique constraint, so a
    second insert for the same checkout session fails with 23505.
    """

    client: Client

    def create_order(self, order: NewOrder) -> Order:
        """Insert the order row, then its items, removing the order on failure."""
        try:
            response = (
                self.client.table("orders")
                .insert(
                    {
                        "user_id": order.user_id,
                        "address_id": order.address_id,
                        "stripe_payment_intent_id": order.payment_intent_id,
                        "stripe_session_id": order.checkout_session_id,
                        "customer_name": order.customer_name,
                        "customer_email": order.customer_email,
                        "customer_phone": order.customer_phone,
                        "ordered_at": datetime.now(tz=UTC).isoformat(),
                        "status": order.status.value,
                        "payment_status": order.payment_status.value,
                        "subtotal": str(order.subtotal),
                        "tax": str(order.tax),
                        "total": str(order.total),
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION and order.checkout_session_id:
                raise DuplicateOrderError(order.checkout_session_id) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create order")
        row = response.data[0]
        item_rows = [
            {
                "order_id": row["id"],
                "package_id": item.package_id,
                "package_name": item.package_name,
                "package_category": item.category,
                "unit_price": str(item.unit_price),
                "quantity": item.quantity,
                "photos_required": item.photos_required,
            }
            for item in order.items
        ]
        try:
            if item_rows:
                self.client.table("order_items").insert(item_rows).execute()
        except Exception:
            logger.error("Rolling back order %s after item insert failure", row["id"])
            self.client.table("orders").delete().eq("id", row["id"]).execute()
            raise
        return _to_order({**row, "order_items": item_rows, "order_photos": []})

    def get_order(self, order_id: int) -> Order | None:
        """Return an order by id, if present."""
        response = (
            self.client.table("orders")
            .select(_ORDER_COLUMNS)
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_order(response.data[0])

    def get_by_session_id(self, session_id: str) -> Order | None:
        """Return the order created for a checkout session, if present."""
        response = (
            self.client.table("orders")
            .select(_ORDER_COLUMNS)
            .eq("stripe_session_id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_order(response.data[0])

    def list_orders(self) -> list[Order]:
        """Return all orders, newest first."""
        response = (
            self.client.table("orders")
            .select(_ORDER_COLUMNS)
            .order("ordered_at", desc=True)
            .execute()
        )
        return [_to_order(row) for row in response.data or []]

    def list_by_user(self, user_id: int) -> list[Order]:
        """Return orders for a user, newest first."""
        response = (
            self.client.table("orders")
            .select(_ORDER_COLUMNS)
            .eq("user_id", user_id)
            .order("ordered_at", desc=True)
            .execute()
        )
        return [_to_order(row) for row in response.data or []]

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        """Return orders in a fulfilment status, newest first."""
        response = (
            self.client.table("orders")
            .select(_ORDER_COLUMNS)
            .eq("status", status.value)
            .order("ordered_at", desc=True)
            .execute()
        )
        return [_to_order(row) for row in response.data or []]

    def update_status(self, order_id: int, status: OrderStatus) -> Order | None:
        """Update the fulfilment status and return the fresh order."""
        response = (
            self.client.table("orders")
            .update(
                {
                    "status": status.value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", order_id)
            .execute()
        )
        if not response.data:
            return None
        return self.get_order(order_id)


def _to_order(row: dict[str, object]) -> Order:
    items = [
        CartItem(
            package_id=int(item["package_id"]),
            package_name=str(item["package_name"]),
            category=item.get("package_category"),
            unit_price=_to_decimal(item["unit_price"]),
            quantity=int(item["quantity"]),
            photos_required=int(item["photos_required"]),
        )
        for item in row.get("order_items") or []
    ]
    photos = [
        str(photo["storage_path"])
        for photo in row.get("order_photos") or []
        if photo.get("storage_path")
    ]
    return Order(
        id=int(row["id"]),
        user_id=row.get("user_id"),
        address_id=int(row["address_id"]),
        payment_intent_id=row.get("stripe_payment_intent_id"),
        checkout_session_id=row.get("stripe_session_id"),
        customer_name=str(row["customer_name"]),
        customer_email=str(row["customer_email"]),
        customer_phone=row.get("customer_phone"),
        ordered_at=datetime.fromisoformat(str(row["ordered_at"])),
        items=items,
        status=OrderStatus(row["status"]),
        payment_status=PaymentStatus(row["payment_status"]),
        subtotal=_to_decimal(row["subtotal"]),
        tax=_to_decimal(row["tax"]),
        total=_to_decimal(row["total"]),
        photos=photos,
    )


def _to_decimal(value: object) -> Decimal:
    return Decimal(str(value))
