"""Application service: Checkout use case.

Steps:
1. Group the trolley by product id.
2. Validate business rules (minimum spend, per-line cap).
3. Reserve stock through the stock service (all or nothing).
4. Ask the customer to pay; a cancelled payment gives the stock back.
5. Ask the hub for a new order, clear the trolley, build the receipt.

Business-rule violations and shortages come back as a CheckoutResult and
leave no order behind.  Storage and stock-service failures propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shophub.application.dto import CheckoutResult, CheckoutStatus, PaymentDecision
from shophub.application.order_hub import OrderHub
from shophub.application.receipt import Receipt
from shophub.domain.exceptions import ExcessiveQuantityError, MinimumSpendError
from shophub.domain.model.order import CustomerTier
from shophub.domain.model.trolley import Trolley
from shophub.domain.model.value_objects import Money
from shophub.domain.repository.stock_service import StockService
from shophub.domain.service.checkout_rules import (
    amount_due,
    group_by_product_id,
    validate_lines,
)

logger = logging.getLogger(__name__)

# Shown the amount due and the tier; returns the customer's decision.
PaymentPrompt = Callable[[Money, CustomerTier], PaymentDecision]


class CheckoutHandler:

    def __init__(
        self,
        hub: OrderHub,
        stock_service: StockService,
        payment_prompt: PaymentPrompt,
    ) -> None:
        self._hub = hub
        self._stock_service = stock_service
        self._payment_prompt = payment_prompt

    def handle(self, trolley: Trolley, tier: CustomerTier) -> CheckoutResult:
        if trolley.is_empty:
            return CheckoutResult(CheckoutStatus.EMPTY_TROLLEY)

        grouped = group_by_product_id(trolley)

        try:
            validate_lines(grouped, tier)
        except MinimumSpendError as exc:
            logger.info("Checkout rejected: %s", exc)
            return CheckoutResult(CheckoutStatus.MINIMUM_SPEND, error=exc)
        except ExcessiveQuantityError as exc:
            logger.info("Checkout rejected: %s", exc)
            trolley.clamp_quantities(exc.original_quantities, exc.cap)
            return CheckoutResult(CheckoutStatus.EXCESSIVE_QUANTITY, error=exc)

        shortages = self._stock_service.purchase_stocks(grouped)
        if shortages:
            trolley.remove_products(p.id for p in shortages)
            logger.info("Checkout short on %d product(s)", len(shortages))
            return CheckoutResult(CheckoutStatus.SHORTAGE, shortages=tuple(shortages))

        decision = self._payment_prompt(amount_due(trolley.total, tier), tier)
        if not decision.confirmed or decision.method is None:
            self._stock_service.release_stocks(grouped)
            logger.info("Payment cancelled; stock released")
            return CheckoutResult(CheckoutStatus.PAYMENT_CANCELLED)

        try:
            order = self._hub.new_order(grouped, tier, decision.method)
        except Exception:
            self._stock_service.release_stocks(grouped)
            raise

        trolley.clear()
        return CheckoutResult(
            CheckoutStatus.PLACED,
            order=order,
            receipt=Receipt.from_order(order),
        )
