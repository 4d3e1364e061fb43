"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import stripe
from supabase import create_client

from fotogifty.adapters.stripe_gateway import PaymentGateway, StripePaymentGateway
from fotogifty.adapters.supabase_address_repository import SupabaseAddressRepository
from fotogifty.adapters.supabase_order_repository import SupabaseOrderRepository
from fotogifty.adapters.supabase_package_repository import (
    SupabasePackageRepository,
)
from fotogifty.adapters.supabase_user_repository import SupabaseUserRepository
from fotogifty.config import Settings
from fotogifty.services.checkout import CheckoutService
from fotogifty.services.orders import OrderService
from fotogifty.services.session_status import SessionStatusService
from fotogifty.services.webhooks import WebhookService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    payment_gateway: PaymentGateway
    checkout_service: CheckoutService
    webhook_service: WebhookService
    session_status_service: SessionStatusService
    order_service: OrderService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    address_repository = SupabaseAddressRepository(supabase_client)
    package_repository = SupabasePackageRepository(supabase_client)
    order_repository = SupabaseOrderRepository(supabase_client)
    stripe_http_client = stripe.HTTPXClient()
    payment_gateway = StripePaymentGateway(
        client=stripe.StripeClient(
            resolved_settings.stripe_secret_key, http_client=stripe_http_client
        ),
        webhook_secret=resolved_settings.stripe_webhook_secret,
        currency=resolved_settings.stripe_currency,
        tax_rate=resolved_settings.tax_rate,
    )
    checkout_service = CheckoutService(
        user_repository=user_repository,
        address_repository=address_repository,
        package_repository=package_repository,
        gateway=payment_gateway,
        tax_rate=resolved_settings.tax_rate,
    )
    webhook_service = WebhookService(
        gateway=payment_gateway,
        order_repository=order_repository,
    )
    session_status_service = SessionStatusService(
        gateway=payment_gateway,
        order_repository=order_repository,
    )
    order_service = OrderService(order_repository)

    async def close_resources() -> None:
        await stripe_http_client.close_async()

    return AppContainer(
        settings=resolved_settings,
        payment_gateway=payment_gateway,
        checkout_service=checkout_service,
        webhook_service=webhook_service,
        session_status_service=session_status_service,
        order_service=order_service,
        close_resources=close_resources,
    )
