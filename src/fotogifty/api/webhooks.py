"""Payment provider webhook endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Header, Request, status
from fastapi.responses import JSONResponse

if TYPE_CHECKING:
    from fotogifty.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="stripe-signature"),
) -> JSONResponse:
    """Receive a Stripe event.

    The body is read raw because the signature covers the exact bytes sent.
    Any non-200 answer makes Stripe redeliver the event later.
    """
    if not stripe_signature:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "error": "INVALID_SIGNATURE",
                "message": "Missing Stripe-Signature header",
            },
        )
    container: AppContainer = request.app.state.container
    payload = await request.body()
    result = await container.webhook_service.handle(payload, stripe_signature)
    if result.success:
        return JSONResponse(
            content={
                "received": True,
                "message": result.message,
                "order_id": result.order_id,
            }
        )
    logger.error("Webhook processing failed: %s (%s)", result.message, result.error)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": result.error, "message": result.message},
    )
