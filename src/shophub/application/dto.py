"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shophub.application.receipt import Receipt
from shophub.domain.exceptions import ExcessiveQuantityError, MinimumSpendError
from shophub.domain.model.order import Order, PaymentMethod
from shophub.domain.model.product import Product


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product ID + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class PaymentDecision:
    """What the customer chose in the payment step."""

    confirmed: bool
    method: PaymentMethod | None = None

    @staticmethod
    def confirmed_with(method: PaymentMethod) -> PaymentDecision:
        return PaymentDecision(True, method)

    @staticmethod
    def cancelled() -> PaymentDecision:
        return PaymentDecision(False, None)


class CheckoutStatus(Enum):
    PLACED = "placed"
    EMPTY_TROLLEY = "empty-trolley"
    MINIMUM_SPEND = "minimum-spend"
    EXCESSIVE_QUANTITY = "excessive-quantity"
    SHORTAGE = "shortage"
    PAYMENT_CANCELLED = "payment-cancelled"


@dataclass(frozen=True)
class CheckoutResult:
    """Outcome of one checkout attempt.

    Only PLACED carries an order and a receipt.  Business-rule outcomes carry
    the error that describes them, SHORTAGE carries the short lines.
    """

    status: CheckoutStatus
    order: Order | None = None
    receipt: Receipt | None = None
    shortages: tuple[Product, ...] = field(default_factory=tuple)
    error: MinimumSpendError | ExcessiveQuantityError | None = None

    @property
    def ok(self) -> bool:
        return self.status is CheckoutStatus.PLACED

    def message(self) -> str:
        if self.status is CheckoutStatus.PLACED:
            return self.receipt.render() if self.receipt else ""
        if self.status is CheckoutStatus.EMPTY_TROLLEY:
            return "Your trolley is empty"
        if self.status is CheckoutStatus.SHORTAGE:
            lines = [
                f"• {p.id}, {p.description} "
                f"(Only {p.stock_quantity} available, {p.ordered_quantity} requested)"
                for p in self.shortages
            ]
            return "\n".join(lines) + "\nThese items have been removed from your trolley."
        if self.status is CheckoutStatus.PAYMENT_CANCELLED:
            return "Payment cancelled; your trolley has been kept."
        return self.error.user_message() if self.error else self.status.value
