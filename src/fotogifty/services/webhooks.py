"""Payment webhook reconciliation."""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from fotogifty.adapters.stripe_gateway import PaymentGateway
from fotogifty.domain.checkout import from_minor_units
from fotogifty.domain.metadata import SessionMetadata
from fotogifty.domain.orders import NewOrder, OrderStatus, PaymentStatus
from fotogifty.errors import DuplicateOrderError, MetadataError
from fotogifty.services.locks import KeyedLocks
from fotogifty.services.orders import OrderRepository

logger = logging.getLogger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
SESSION_EXPIRED = "checkout.session.expired"
PAYMENT_FAILED = "payment_intent.payment_failed"


@dataclass(frozen=True)
class WebhookResult:
    """Outcome reported back to the payment provider."""

    success: bool
    message: str
    order_id: int | None = None
    error: str | None = None


@dataclass
class WebhookService:
    """Turns verified provider events into orders, at most once per session."""

    gateway: PaymentGateway
    order_repository: OrderRepository
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    async def handle(self, payload: bytes, signature: str) -> WebhookResult:
        """Verify and dispatch a raw webhook delivery.

        Raises InvalidSignatureError before anything in the payload is read.
        Failed results should be answered with a non-2xx status so the
        provider redelivers the event later.
        """
        event = self.gateway.verify_event(payload, signature)
        event_type = str(event.get("type") or "")
        data_object = _event_object(event)
        logger.info("Received webhook event %s (%s)", event_type, event.get("id"))

        if event_type == SESSION_COMPLETED:
            return await self.reconcile_session(data_object)
        if event_type == SESSION_EXPIRED:
            logger.info("Checkout session %s expired", data_object.get("id"))
            return WebhookResult(success=True, message="Session expiry acknowledged")
        if event_type == PAYMENT_FAILED:
            logger.warning("Payment failed for intent %s", data_object.get("id"))
            return WebhookResult(success=True, message="Payment failure acknowledged")
        logger.info("Ignoring unhandled webhook event %s", event_type)
        return WebhookResult(
            success=True, message=f"Event {event_type} received but not processed"
        )

    async def reconcile_session(self, session: dict[str, object]) -> WebhookResult:
        """Create the order for a completed checkout session exactly once."""
        session_id = session.get("id")
        if not isinstance(session_id, str) or not session_id:
            return WebhookResult(
                success=False,
                message="Completed session has no id",
                error="RECONCILE_ERROR",
            )
        async with self.locks.hold(session_id):
            try:
                # Store calls block; run them off the loop under the lock.
                return await asyncio.to_thread(
                    self._create_order_once, session_id, session
                )
            except MetadataError as exc:
                logger.error("Cannot reconcile session %s: %s", session_id, exc)
                return WebhookResult(success=False, message=exc.message, error=exc.code)
            except Exception:
                logger.exception("Failed to reconcile session %s", session_id)
                return WebhookResult(
                    success=False,
                    message="Failed to create the order",
                    error="RECONCILE_ERROR",
                )

    def _create_order_once(
        self, session_id: str, session: dict[str, object]
    ) -> WebhookResult:
        raw_metadata = session.get("metadata")
        metadata = SessionMetadata.from_provider_metadata(
            raw_metadata if isinstance(raw_metadata, dict) else None
        )
        existing = self.order_repository.get_by_session_id(session_id)
        if existing is not None:
            logger.info(
                "Order %s already exists for session %s", existing.id, session_id
            )
            return _already_reconciled(existing.id)

        raw_details = session.get("customer_details")
        details = raw_details if isinstance(raw_details, dict) else {}
        phone = metadata.customer_phone or _optional_str(details.get("phone"))
        new_order = NewOrder(
            user_id=metadata.user_id,
            address_id=metadata.address_id,
            customer_name=metadata.customer_name or str(details.get("name") or ""),
            customer_email=metadata.customer_email or str(details.get("email") or ""),
            customer_phone=phone,
            items=metadata.cart_items(),
            subtotal=metadata.subtotal,
            tax=metadata.tax,
            total=_captured_total(session, metadata.total),
            payment_intent_id=_payment_intent_id(session),
            checkout_session_id=session_id,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PAID,
        )
        try:
            order = self.order_repository.create_order(new_order)
        except DuplicateOrderError:
            existing = self.order_repository.get_by_session_id(session_id)
            logger.info("Session %s was reconciled concurrently", session_id)
            return _already_reconciled(existing.id if existing else None)
        logger.info("Created order %s for session %s", order.id, session_id)
        return WebhookResult(
            success=True, message=f"Order {order.id} created", order_id=order.id
        )


def _already_reconciled(order_id: int | None) -> WebhookResult:
    return WebhookResult(
        success=True, message="Order was already created", order_id=order_id
    )


def _event_object(event: dict[str, object]) -> dict[str, object]:
    data = event.get("data")
    if isinstance(data, dict):
        data_object = data.get("object")
        if isinstance(data_object, dict):
            return data_object
    return {}


def _captured_total(session: dict[str, object], fallback: Decimal) -> Decimal:
    amount_total = session.get("amount_total")
    if isinstance(amount_total, int) and amount_total > 0:
        return from_minor_units(amount_total)
    return fallback


def _payment_intent_id(session: dict[str, object]) -> str | None:
    intent = session.get("payment_intent")
    if isinstance(intent, str):
        return intent or None
    if isinstance(intent, dict):
        intent_id = intent.get("id")
        return intent_id if isinstance(intent_id, str) else None
    return None


def _optional_str(value: object) -> str | None:
    return str(value) if value else None
