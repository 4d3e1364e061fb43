"""Checkout endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from fotogifty.api.schemas import CreateCheckoutSessionIn, serialize_order

if TYPE_CHECKING:
    from fotogifty.containers import AppContainer

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/crear-sesion")
async def create_checkout_session(
    body: CreateCheckoutSessionIn, request: Request
) -> dict[str, object]:
    """Validate the cart and open a payment checkout session."""
    container: AppContainer = request.app.state.container
    session = await container.checkout_service.create_session(body.to_request())
    return {
        "success": True,
        "data": {"session_id": session.session_id, "url": session.url},
    }


@router.get("/verificar-sesion/{session_id}")
async def verify_checkout_session(
    session_id: str, request: Request
) -> dict[str, object]:
    """Return provider status and the reconciled order, if it exists yet."""
    container: AppContainer = request.app.state.container
    verification = await container.session_status_service.verify(session_id)
    return {
        "success": True,
        "data": {
            "status": verification.status,
            "payment_status": verification.payment_status,
            "order": (
                serialize_order(verification.order) if verification.order else None
            ),
        },
    }
