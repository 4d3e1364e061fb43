"""Checkout session status polling."""

from dataclasses import dataclass

from fotogifty.adapters.stripe_gateway import PaymentGateway
from fotogifty.domain.checkout import SessionVerification
from fotogifty.errors import InvalidRequestError
from fotogifty.services.orders import OrderRepository


@dataclass
class SessionStatusService:
    """Reports provider status alongside the locally reconciled order."""

    gateway: PaymentGateway
    order_repository: OrderRepository

    async def verify(self, session_id: str) -> SessionVerification:
        """Return provider status and the order for a session.

        The order is None until the completion webhook has been reconciled,
        so a paid session without an order is an expected transient state.
        """
        if not session_id or not session_id.strip():
            raise InvalidRequestError("Session id is required")
        status = await self.gateway.retrieve_session(session_id)
        order = self.order_repository.get_by_session_id(session_id)
        return SessionVerification(
            status=status.status,
            payment_status=status.payment_status,
            order=order,
        )
