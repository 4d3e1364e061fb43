"""Stripe payment gateway adapter."""

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

import stripe

from fotogifty.domain.checkout import (
    CheckoutSession,
    CustomerInfo,
    PricedCart,
    SessionStatus,
    from_minor_units,
    to_minor_units,
)
from fotogifty.errors import GatewayError, InvalidSignatureError


class PaymentGateway(Protocol):
    """Interface for payment provider interactions."""

    async def create_session(  # noqa: PLR0913
        self,
        cart: PricedCart,
        customer: CustomerInfo,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> CheckoutSession:
        """Create a hosted checkout session for a priced cart."""

    async def retrieve_session(self, session_id: str) -> SessionStatus:
        """Return the live status of a checkout session."""

    def verify_event(self, payload: bytes, signature: str) -> dict[str, object]:
        """Verify a webhook signature over the raw body and parse the event."""


@dataclass
class StripePaymentGateway(PaymentGateway):
    """Stripe Checkout implementation over an injected `StripeClient`."""

    client: stripe.StripeClient
    webhook_secret: str
    currency: str = "mxn"
    tax_rate: Decimal = Decimal("0.16")
    tolerance_seconds: int = stripe.Webhook.DEFAULT_TOLERANCE

    async def create_session(  # noqa: PLR0913
        self,
        cart: PricedCart,
        customer: CustomerInfo,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> CheckoutSession:
        """Create a card-payment checkout session with a separate tax line."""
        line_items = [
            self._line_item(
                item.package_name, item.category, item.unit_price, item.quantity
            )
            for item in cart.items
        ]
        if cart.tax > 0:
            line_items.append(
                self._line_item(
                    _tax_label(self.tax_rate),
                    "Impuesto al Valor Agregado",
                    cart.tax,
                    1,
                )
            )
        try:
            session = await self.client.v1.checkout.sessions.create_async(
                params={
                    "payment_method_types": ["card"],
                    "mode": "payment",
                    "customer_email": customer.email,
                    "line_items": line_items,
                    "metadata": metadata,
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                }
            )
        except stripe.StripeError as exc:
            raise GatewayError(_stripe_message(exc)) from exc
        if not session.url:
            raise GatewayError("Checkout session was created without a URL")
        return CheckoutSession(session_id=session.id, url=session.url)

    async def retrieve_session(self, session_id: str) -> SessionStatus:
        """Fetch a checkout session from Stripe."""
        try:
            session = await self.client.v1.checkout.sessions.retrieve_async(
                session_id
            )
        except stripe.StripeError as exc:
            raise GatewayError(_stripe_message(exc)) from exc
        amount_total = getattr(session, "amount_total", None)
        status = getattr(session, "status", None) or "unknown"
        payment_status = getattr(session, "payment_status", None) or "unknown"
        return SessionStatus(
            session_id=session.id,
            status=status,
            payment_status=payment_status,
            amount_total=(
                from_minor_units(amount_total)
                if isinstance(amount_total, int)
                else None
            ),
            raw={
                "id": session.id,
                "status": status,
                "payment_status": payment_status,
                "amount_total": amount_total,
                "payment_intent": getattr(session, "payment_intent", None),
            },
        )

    def verify_event(self, payload: bytes, signature: str) -> dict[str, object]:
        """Check the Stripe-Signature header and decode the event body."""
        try:
            text = payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                text, signature, self.webhook_secret, self.tolerance_seconds
            )
        except (UnicodeDecodeError, stripe.SignatureVerificationError) as exc:
            raise InvalidSignatureError(f"Webhook signature rejected: {exc}") from exc
        try:
            event = json.loads(text)
        except ValueError as exc:
            raise InvalidSignatureError("Webhook payload is not valid JSON") from exc
        if not isinstance(event, dict):
            raise InvalidSignatureError("Webhook payload is not an event object")
        return event

    def _line_item(
        self, name: str, description: str | None, amount: Decimal, quantity: int
    ) -> dict[str, object]:
        product_data: dict[str, object] = {"name": name}
        if description:
            product_data["description"] = description
        return {
            "price_data": {
                "currency": self.currency,
                "product_data": product_data,
                "unit_amount": to_minor_units(amount),
            },
            "quantity": quantity,
        }


def _tax_label(rate: Decimal) -> str:
    percent = format((rate * 100).normalize(), "f")
    return f"IVA ({percent}%)"


def _stripe_message(exc: stripe.StripeError) -> str:
    return exc.user_message or str(exc) or type(exc).__name__
