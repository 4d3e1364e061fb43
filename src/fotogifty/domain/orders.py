"""Domain models for orders."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum


class OrderStatus(StrEnum):
    """Fulfilment stage of an order. Any stage may be set directly."""

    PENDING = "pending"
    SHIPPED = "shipped"
    PRINTING = "printing"
    PACKAGED = "packaged"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    ARCHIVED = "archived"


class PaymentStatus(StrEnum):
    """Payment state of an order."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass(frozen=True)
class CartItem:
    """A priced package line, as claimed in a cart or confirmed in an order."""

    package_id: int
    package_name: str
    unit_price: Decimal
    quantity: int
    photos_required: int
    category: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class NewOrder:
    """Order data ready to be persisted."""

    user_id: int | None
    address_id: int
    customer_name: str
    customer_email: str
    customer_phone: str | None
    items: list[CartItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_intent_id: str | None = None
    checkout_session_id: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING


@dataclass(frozen=True)
class Order:
    """Persisted order with its confirmed line items."""

    id: int
    user_id: int | None
    address_id: int
    customer_name: str
    customer_email: str
    customer_phone: str | None
    ordered_at: datetime
    items: list[CartItem]
    status: OrderStatus
    payment_status: PaymentStatus
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_intent_id: str | None = None
    checkout_session_id: str | None = None
    photos: list[str] = field(default_factory=list)
