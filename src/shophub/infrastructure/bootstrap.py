"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
The hub it builds is the one process-wide instance; everything that needs
it receives it as a constructor argument.
"""

from __future__ import annotations

from shophub.application.checkout import CheckoutHandler, PaymentPrompt
from shophub.application.customer import CustomerSession
from shophub.application.order_hub import OrderHub
from shophub.domain.model.order import CustomerTier
from shophub.infrastructure.config import Settings
from shophub.infrastructure.persistence.json_stock_service import JsonStockService
from shophub.infrastructure.persistence.order_counter import FileOrderCounter
from shophub.infrastructure.persistence.order_file_store import FileOrderStore


def order_store(settings: Settings) -> FileOrderStore:
    store = FileOrderStore(settings.orders_dir)
    store.ensure_directories()
    return store


def stock_service(settings: Settings) -> JsonStockService:
    return JsonStockService(settings.catalogue_file)


def order_hub(settings: Settings) -> OrderHub:
    """Build the hub and load the live orders from disk."""
    store = order_store(settings)
    hub = OrderHub(
        store,
        FileOrderCounter(store, settings.counter_file),
        grace_period=settings.grace_period,
    )
    try:
        hub.initialize()
    except Exception:
        hub.shutdown()
        raise
    return hub


def customer_session(
    settings: Settings,
    hub: OrderHub,
    payment_prompt: PaymentPrompt,
    tier: CustomerTier = CustomerTier.STANDARD,
) -> CustomerSession:
    stocks = stock_service(settings)
    return CustomerSession(stocks, CheckoutHandler(hub, stocks, payment_prompt), tier)
