"""Domain service: checkout business rules.

Pure functions over product lines.  They never touch the trolley or the
stock service; the checkout handler decides what to do with a violation.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from shophub.domain.exceptions import ExcessiveQuantityError, MinimumSpendError
from shophub.domain.model.order import CustomerTier
from shophub.domain.model.product import Product
from shophub.domain.model.product_list import total_of
from shophub.domain.model.value_objects import Money

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MINIMUM_SPEND = Money(Decimal("5.00"))
MAX_LINE_QUANTITY = 50
PRIME_DISCOUNT_RATE = Decimal("0.10")

# Tiers that must reach MINIMUM_SPEND; VIP and Prime bypass it.
_MINIMUM_SPEND_TIERS = frozenset({CustomerTier.STANDARD})


def group_by_product_id(lines: Iterable[Product]) -> list[Product]:
    """Collapse lines sharing a product id, summing quantities.

    Keeps the order in which each id was first seen.
    """
    grouped: dict[str, Product] = {}
    for line in lines:
        existing = grouped.get(line.id)
        if existing is None:
            grouped[line.id] = line
        else:
            grouped[line.id] = existing.with_ordered_quantity(
                existing.ordered_quantity + line.ordered_quantity
            )
    return list(grouped.values())


def validate_lines(lines: list[Product], tier: CustomerTier) -> None:
    """Check the minimum spend, then the per-line quantity cap.

    Raises MinimumSpendError or ExcessiveQuantityError.
    """
    total = total_of(lines)
    if tier in _MINIMUM_SPEND_TIERS and total < MINIMUM_SPEND:
        raise MinimumSpendError(total, MINIMUM_SPEND)

    excessive = [p for p in lines if p.ordered_quantity > MAX_LINE_QUANTITY]
    if excessive:
        raise ExcessiveQuantityError(excessive, MAX_LINE_QUANTITY)


def amount_due(total: Money, tier: CustomerTier) -> Money:
    """Amount the customer pays: Prime members get 10% off the pre-tax total."""
    if tier is CustomerTier.PRIME:
        return total.discounted(PRIME_DISCOUNT_RATE)
    return total
