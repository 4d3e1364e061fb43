"""Checkout session orchestration.

The orchestrator is the only place where client-claimed prices are checked
against the catalog. Everything it accepts is frozen into the session
metadata, and the webhook reconciler later trusts that snapshot as is.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Protocol

from fotogifty.adapters.stripe_gateway import PaymentGateway
from fotogifty.domain.checkout import (
    CheckoutRequest,
    CheckoutSession,
    PricedCart,
    amounts_match,
    is_whole_cents,
    quantize_money,
    truncate_money,
)
from fotogifty.domain.metadata import SessionMetadata
from fotogifty.domain.models import AddressRecord, PackageRecord, UserRecord
from fotogifty.domain.orders import CartItem
from fotogifty.errors import (
    ConsistencyError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Read access to customer accounts."""

    def get_user(self, user_id: int) -> UserRecord | None:
        """Return a user by id, if present."""


class AddressRepository(Protocol):
    """Read access to shipping addresses."""

    def get_address(self, address_id: int) -> AddressRecord | None:
        """Return an address by id, if present."""


class PackageRepository(Protocol):
    """Read access to the package catalog."""

    def get_package(self, package_id: int) -> PackageRecord | None:
        """Return a catalog package by id, if present."""


@dataclass
class CheckoutService:
    """Validates carts and opens payment sessions for them."""

    user_repository: UserRepository
    address_repository: AddressRepository
    package_repository: PackageRepository
    gateway: PaymentGateway
    tax_rate: Decimal = Decimal("0.16")

    async def create_session(self, request: CheckoutRequest) -> CheckoutSession:
        """Validate the cart and create a checkout session.

        Checks run in a fixed order and the first failure is raised. No
        gateway call happens unless every check passes.
        """
        _require_fields(request)
        if self.user_repository.get_user(request.user_id) is None:
            raise NotFoundError(
                f"User {request.user_id} does not exist", code="USER_NOT_FOUND"
            )
        address = self.address_repository.get_address(request.address_id)
        if address is None:
            raise NotFoundError(
                f"Address {request.address_id} does not exist",
                code="ADDRESS_NOT_FOUND",
            )
        if address.user_id != request.user_id:
            raise UnauthorizedError(
                "Address does not belong to the user", code="ADDRESS_UNAUTHORIZED"
            )
        priced_items = [self._check_against_catalog(item) for item in request.items]
        cart = self.price_cart(request, priced_items)

        metadata = SessionMetadata.from_cart_items(
            cart.items,
            user_id=request.user_id,
            address_id=request.address_id,
            customer_name=request.customer.name,
            customer_email=request.customer.email,
            customer_phone=request.customer.phone,
            subtotal=cart.subtotal,
            tax=cart.tax,
            total=cart.total,
        )
        session = await self.gateway.create_session(
            cart=cart,
            customer=request.customer,
            success_url=request.success_url,
            cancel_url=request.cancel_url,
            metadata=metadata.to_provider_metadata(),
        )
        logger.info(
            "Created checkout session %s for user %s (total %s)",
            session.session_id,
            request.user_id,
            cart.total,
        )
        return session

    def price_cart(
        self, request: CheckoutRequest, items: list[CartItem]
    ) -> PricedCart:
        """Recompute subtotal, tax and total and compare with the claims.

        `items` are the request lines repriced from the catalog. Tax is
        truncated to whole cents, so the charged total is exactly the sum of
        the lines sent to the payment provider.
        """
        subtotal = sum((item.line_total for item in items), Decimal("0"))
        if not amounts_match(subtotal, request.subtotal):
            raise ConsistencyError(
                f"Subtotal {request.subtotal} does not match items ({subtotal})",
                code="SUBTOTAL_MISMATCH",
            )
        tax = subtotal * self.tax_rate
        if not amounts_match(tax, request.tax):
            raise ConsistencyError(
                f"Tax {request.tax} does not match computed tax ({tax})",
                code="TAX_MISMATCH",
            )
        total = subtotal + tax
        if not amounts_match(total, request.total):
            raise ConsistencyError(
                f"Total {request.total} does not match subtotal + tax ({total})",
                code="TOTAL_MISMATCH",
            )
        charged_tax = truncate_money(tax)
        return PricedCart(
            items=items,
            subtotal=subtotal,
            tax=charged_tax,
            total=subtotal + charged_tax,
        )

    def _check_against_catalog(self, item: CartItem) -> CartItem:
        """Verify a line and return it at the catalog price."""
        package = self.package_repository.get_package(item.package_id)
        if package is None:
            raise NotFoundError(
                f"Package {item.package_id} does not exist",
                code="PACKAGE_NOT_FOUND",
            )
        catalog_price = quantize_money(package.unit_price)
        if not amounts_match(catalog_price, item.unit_price):
            raise ConsistencyError(
                f"Price for {item.package_name} does not match the catalog",
                code="PRICE_MISMATCH",
            )
        expected_photos = package.photos_per_unit * item.quantity
        if item.photos_required != expected_photos:
            raise ConsistencyError(
                f"{item.package_name} needs {expected_photos} photos, "
                f"got {item.photos_required}",
                code="PHOTO_COUNT_MISMATCH",
            )
        return replace(item, unit_price=catalog_price)


def _require_fields(request: CheckoutRequest) -> None:
    if (
        not request.customer.name
        or not request.customer.email
        or not request.address_id
        or not request.items
    ):
        raise InvalidRequestError("Name, email, address and items are required")
    if not request.success_url or not request.cancel_url:
        raise InvalidRequestError("Success and cancel URLs are required")
    for item in request.items:
        if item.quantity <= 0:
            raise InvalidRequestError(
                f"Quantity for package {item.package_id} must be positive"
            )
        if item.unit_price < 0:
            raise InvalidRequestError(
                f"Price for package {item.package_id} cannot be negative"
            )
        if not is_whole_cents(item.unit_price):
            raise InvalidRequestError(
                f"Price for package {item.package_id} must be in whole cents"
            )
