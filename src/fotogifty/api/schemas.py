"""Pydantic models for request payloads and response serialization."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from fotogifty.domain.checkout import CheckoutRequest, CustomerInfo
from fotogifty.domain.orders import CartItem, Order


class CheckoutItemIn(BaseModel):
    """Cart line as submitted by the storefront."""

    model_config = ConfigDict(populate_by_name=True)

    package_id: int = Field(alias="id_paquete", gt=0)
    package_name: str = Field(alias="nombre_paquete", min_length=1)
    category: str | None = Field(default=None, alias="categoria_paquete")
    unit_price: Decimal = Field(alias="precio_unitario", ge=0, decimal_places=2)
    quantity: int = Field(alias="cantidad", gt=0)
    photos_required: int = Field(alias="num_fotos_requeridas", ge=0)


class CreateCheckoutSessionIn(BaseModel):
    """Checkout request body."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="id_usuario", gt=0)
    address_id: int = Field(alias="id_direccion", gt=0)
    customer_name: str = Field(alias="nombre_cliente", min_length=1)
    customer_email: str = Field(alias="email_cliente", min_length=1)
    customer_phone: str | None = Field(default=None, alias="telefono_cliente")
    items: list[CheckoutItemIn] = Field(min_length=1)
    subtotal: Decimal = Field(ge=0)
    tax: Decimal = Field(alias="iva", ge=0)
    total: Decimal = Field(ge=0)
    success_url: str = Field(min_length=1)
    cancel_url: str = Field(min_length=1)

    def to_request(self) -> CheckoutRequest:
        return CheckoutRequest(
            user_id=self.user_id,
            address_id=self.address_id,
            customer=CustomerInfo(
                name=self.customer_name,
                email=self.customer_email,
                phone=self.customer_phone or None,
            ),
            items=[
                CartItem(
                    package_id=item.package_id,
                    package_name=item.package_name,
                    category=item.category,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    photos_required=item.photos_required,
                )
                for item in self.items
            ],
            subtotal=self.subtotal,
            tax=self.tax,
            total=self.total,
            success_url=self.success_url,
            cancel_url=self.cancel_url,
        )


class UpdateOrderStatusIn(BaseModel):
    """Body for moving an order to another fulfilment stage."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(alias="estado", min_length=1)


def serialize_order(order: Order) -> dict[str, object]:
    """Render an order as JSON-compatible data."""
    return {
        "id": order.id,
        "user_id": order.user_id,
        "address_id": order.address_id,
        "payment_intent_id": order.payment_intent_id,
        "checkout_session_id": order.checkout_session_id,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "ordered_at": order.ordered_at.isoformat(),
        "items": [_serialize_item(item) for item in order.items],
        "status": order.status.value,
        "payment_status": order.payment_status.value,
        "subtotal": float(order.subtotal),
        "tax": float(order.tax),
        "total": float(order.total),
        "photos": list(order.photos),
    }


def _serialize_item(item: CartItem) -> dict[str, object]:
    return {
        "package_id": item.package_id,
        "package_name": item.package_name,
        "category": item.category,
        "unit_price": float(item.unit_price),
        "quantity": item.quantity,
        "photos_required": item.photos_required,
    }
