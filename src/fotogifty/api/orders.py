"""Order management endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from fotogifty.api.schemas import UpdateOrderStatusIn, serialize_order

if TYPE_CHECKING:
    from fotogifty.containers import AppContainer

router = APIRouter(tags=["orders"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/orders", dependencies=[Depends(require_admin)])
async def list_orders(
    request: Request,
    status_filter: str | None = Query(default=None, alias="status"),
) -> dict[str, object]:
    """Return all orders, optionally filtered by fulfilment status."""
    container: AppContainer = request.app.state.container
    if status_filter:
        orders = container.order_service.list_by_status(status_filter)
    else:
        orders = container.order_service.list_orders()
    return {"success": True, "data": [serialize_order(order) for order in orders]}


@router.get("/orders/{order_id}", dependencies=[Depends(require_admin)])
async def get_order(order_id: int, request: Request) -> dict[str, object]:
    """Return a single order."""
    container: AppContainer = request.app.state.container
    order = container.order_service.get_order(order_id)
    return {"success": True, "data": serialize_order(order)}


@router.get("/users/{user_id}/orders", dependencies=[Depends(require_admin)])
async def list_user_orders(user_id: int, request: Request) -> dict[str, object]:
    """Return orders placed by a user."""
    container: AppContainer = request.app.state.container
    orders = container.order_service.list_user_orders(user_id)
    return {"success": True, "data": [serialize_order(order) for order in orders]}


@router.patch("/orders/{order_id}/status", dependencies=[Depends(require_admin)])
async def update_order_status(
    order_id: int, body: UpdateOrderStatusIn, request: Request
) -> dict[str, object]:
    """Move an order to another fulfilment stage."""
    container: AppContainer = request.app.state.container
    order = container.order_service.update_status(order_id, body.status)
    return {"success": True, "data": serialize_order(order)}
