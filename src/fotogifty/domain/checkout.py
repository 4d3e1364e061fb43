"""Domain models for checkout sessions."""

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from fotogifty.domain.orders import CartItem, Order

CENT = Decimal("0.01")
MONEY_TOLERANCE = CENT


def quantize_money(amount: Decimal) -> Decimal:
    """Round an amount to whole cents, half up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def truncate_money(amount: Decimal) -> Decimal:
    """Drop fractions of a cent. Tax is charged this way."""
    return amount.quantize(CENT, rounding=ROUND_DOWN)


def is_whole_cents(amount: Decimal) -> bool:
    return amount == amount.quantize(CENT)


def to_minor_units(amount: Decimal) -> int:
    """Convert an amount to integer cents for the payment provider."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(CENT)


def amounts_match(expected: Decimal, claimed: Decimal) -> bool:
    """Return true when two amounts differ by at most one cent."""
    return abs(expected - claimed) <= MONEY_TOLERANCE


@dataclass(frozen=True)
class CustomerInfo:
    """Contact details captured at checkout."""

    name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class CheckoutRequest:
    """Client-submitted cart and the amounts it claims."""

    user_id: int
    address_id: int
    customer: CustomerInfo
    items: list[CartItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    success_url: str
    cancel_url: str


@dataclass(frozen=True)
class PricedCart:
    """Cart lines with server-computed amounts."""

    items: list[CartItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class CheckoutSession:
    """Provider checkout session the customer is redirected to."""

    session_id: str
    url: str


@dataclass(frozen=True)
class SessionStatus:
    """Live state of a checkout session as reported by the provider."""

    session_id: str
    status: str
    payment_status: str
    amount_total: Decimal | None = None
    raw: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionVerification:
    """Provider status paired with the locally reconciled order, if any."""

    status: str
    payment_status: str
    order: Order | None
