"""Order queries and status management."""

from dataclasses import dataclass
from typing import Protocol

from fotogifty.domain.orders import NewOrder, Order, OrderStatus
from fotogifty.errors import InvalidRequestError, NotFoundError


class OrderRepository(Protocol):
    """Persistence interface for orders and their items."""

    def create_order(self, order: NewOrder) -> Order:
        """Persist an order with all its items, or nothing at all.

        Raises DuplicateOrderError when an order already exists for the same
        checkout session.
        """

    def get_order(self, order_id: int) -> Order | None:
        """Return an order by id, if present."""

    def get_by_session_id(self, session_id: str) -> Order | None:
        """Return the order created for a checkout session, if present."""

    def list_orders(self) -> list[Order]:
        """Return all orders, newest first."""

    def list_by_user(self, user_id: int) -> list[Order]:
        """Return orders placed by a user, newest first."""

    def list_by_status(self, status: OrderStatus) -> list[Order]:
        """Return orders in a given fulfilment status."""

    def update_status(self, order_id: int, status: OrderStatus) -> Order | None:
        """Set the fulfilment status and return the updated order."""


@dataclass
class OrderService:
    """Application service for reading and advancing orders."""

    repository: OrderRepository

    def get_order(self, order_id: int) -> Order:
        order = self.repository.get_order(order_id)
        if order is None:
            raise NotFoundError(
                f"Order {order_id} does not exist", code="ORDER_NOT_FOUND"
            )
        return order

    def list_orders(self) -> list[Order]:
        return self.repository.list_orders()

    def list_user_orders(self, user_id: int) -> list[Order]:
        return self.repository.list_by_user(user_id)

    def list_by_status(self, status: str) -> list[Order]:
        """Return orders in a status given by its name."""
        return self.repository.list_by_status(parse_status(status))

    def update_status(self, order_id: int, status: str) -> Order:
        """Move an order to any named status.

        There is no transition table: staff may set any stage, including
        moving an order back.
        """
        parsed = parse_status(status)
        updated = self.repository.update_status(order_id, parsed)
        if updated is None:
            raise NotFoundError(
                f"Order {order_id} does not exist", code="ORDER_NOT_FOUND"
            )
        return updated


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise InvalidRequestError(
            f"Unknown order status '{value}'. Expected one of: {allowed}"
        ) from exc
