"""Customer receipt built from a confirmed order."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from shophub.domain.exceptions import StorageError
from shophub.domain.model.order import CustomerTier, Order, PaymentMethod
from shophub.domain.model.product_list import format_product_list
from shophub.domain.model.value_objects import Money
from shophub.domain.service.checkout_rules import PRIME_DISCOUNT_RATE, amount_due

logger = logging.getLogger(__name__)

RULE = "=" * 50

TIER_BENEFITS: dict[CustomerTier, tuple[str, ...]] = {
    CustomerTier.STANDARD: (
        "Minimum order: £5.00",
        "Standard delivery from warehouse",
        "Regular customer support",
    ),
    CustomerTier.VIP: (
        "No minimum order requirement",
        "Fast delivery from warehouse",
        "Staff will prepare and deliver your order quickly",
        "Priority customer support",
    ),
    CustomerTier.PRIME: (
        "No minimum order requirement",
        "Express delivery from warehouse",
        "10% discount on all orders",
        "Staff will prioritize and deliver your order immediately",
        "Dedicated customer support",
    ),
}


@dataclass(frozen=True)
class Receipt:
    order_id: int
    ordered_date_time: str
    customer_tier: CustomerTier
    payment_method: PaymentMethod
    lines: str
    subtotal: Money
    discount: Money
    amount_paid: Money

    @staticmethod
    def from_order(order: Order) -> Receipt:
        subtotal = order.total
        paid = amount_due(subtotal, order.customer_tier)
        return Receipt(
            order_id=order.id,
            ordered_date_time=order.ordered_date_time,
            customer_tier=order.customer_tier,
            payment_method=order.payment_method,
            lines=format_product_list(order.items),
            subtotal=subtotal,
            discount=subtotal - paid,
            amount_paid=paid,
        )

    @property
    def benefits(self) -> tuple[str, ...]:
        return TIER_BENEFITS[self.customer_tier]

    def render(self) -> str:
        parts = [
            f"Order_ID: {self.order_id}",
            f"Ordered_Date_Time: {self.ordered_date_time}",
            f"Customer: {self.customer_tier.value}",
            f"Payment: {self.payment_method.value}",
            self.lines.rstrip("\n"),
        ]
        if self.discount.amount > 0:
            rate = int(PRIME_DISCOUNT_RATE * 100)
            parts.append(f" {f'{self.customer_tier.value} discount ({rate}%)':<35} -£{self.discount.amount:6.2f}")
            parts.append(f" {'Amount paid':<35} £{self.amount_paid.amount:7.2f}")
        parts.append("")
        parts.append(f"{self.customer_tier.value} benefits:")
        parts.extend(f"  * {benefit}" for benefit in self.benefits)
        return "\n".join(parts) + "\n"

    def save(self, directory: Path, now: datetime | None = None) -> Path:
        """Write the receipt to ``receipt_<id>_<timestamp>.txt`` in ``directory``."""
        stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        path = directory / f"receipt_{self.order_id}_{stamp}.txt"
        content = f"{RULE}\nHAPPYSHOP RECEIPT\n{RULE}\n{self.render()}{RULE}\n"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot save receipt to {path}: {exc}") from exc
        logger.info("Receipt saved to %s", path)
        return path
