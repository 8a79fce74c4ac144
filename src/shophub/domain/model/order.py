"""Order aggregate and its lifecycle states.

An Order is created at checkout and owned by the OrderHub for the rest of
its life.  Its line items are a snapshot of the trolley: later catalogue
changes never reach an existing order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from shophub.domain.exceptions import ValidationError
from shophub.domain.model.product import Product
from shophub.domain.model.product_list import format_product_list, total_of
from shophub.domain.model.value_objects import Money

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ParseableEnum(Enum):

    @classmethod
    def parse(cls, raw: str):
        for member in cls:
            if member.value.lower() == raw.strip().lower():
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValidationError(f"Unknown {cls.__name__} '{raw}' (expected one of {choices})")


class OrderState(_ParseableEnum):
    """Where an order is in the pick-and-collect workflow.

    The conventional flow is Ordered -> Progressing -> Ready -> Collected,
    but a picker may move an order to any other state.
    """

    ORDERED = "Ordered"
    PROGRESSING = "Progressing"
    READY = "Ready"
    COLLECTED = "Collected"


# States a picker can still act on; Collected orders are only shown to trackers.
ACTIONABLE_STATES = frozenset(
    {OrderState.ORDERED, OrderState.PROGRESSING, OrderState.READY}
)


class CustomerTier(_ParseableEnum):
    STANDARD = "Standard"
    VIP = "VIP"
    PRIME = "Prime"


class PaymentMethod(_ParseableEnum):
    CASH = "Cash"
    CREDIT_CARD = "CreditCard"
    DEBIT_CARD = "DebitCard"


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders; it enforces the invariants.  The
    plain constructor is kept for rebuilding orders in tests and tools.
    """

    id: int
    state: OrderState
    items: tuple[Product, ...]
    customer_tier: CustomerTier = CustomerTier.STANDARD
    payment_method: PaymentMethod = PaymentMethod.CASH
    ordered_at: datetime = field(default_factory=datetime.now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: int,
        items: list[Product] | tuple[Product, ...],
        customer_tier: CustomerTier,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        ordered_at: datetime | None = None,
    ) -> Order:
        """Create a new order in the Ordered state."""
        if order_id <= 0:
            raise ValidationError(f"Order ID must be positive, got {order_id}")
        if not items:
            raise ValidationError("Order must contain at least one item")
        for item in items:
            if item.ordered_quantity <= 0:
                raise ValidationError(
                    f"Quantity for product {item.id} must be positive"
                )

        return Order(
            id=order_id,
            state=OrderState.ORDERED,
            # Products are frozen; a tuple of them is a true snapshot.
            items=tuple(items),
            customer_tier=customer_tier,
            payment_method=payment_method,
            # Second precision, matching the timestamp written to disk.
            ordered_at=(ordered_at or datetime.now()).replace(microsecond=0),
        )

    def with_state(self, state: OrderState) -> Order:
        return replace(self, state=state)

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return total_of(self.items)

    @property
    def ordered_date_time(self) -> str:
        return self.ordered_at.strftime(TIMESTAMP_FORMAT)

    def details(self) -> str:
        """Render the order file body.  The first line always carries the state."""
        return (
            f"{state_header(self.state)}\n"
            f"Order ID: {self.id}\n"
            f"CustomerType: {self.customer_tier.value}\n"
            f"PaymentMethod: {self.payment_method.value}\n"
            f"OrderedDateTime: {self.ordered_date_time}\n"
            f"Items:\n"
            f"{format_product_list(self.items)}"
        )


def state_header(state: OrderState) -> str:
    return f"State: {state.value}"


def parse_header(body: str) -> dict[str, str]:
    """Extract the ``Key: value`` header fields that precede ``Items:``."""
    fields: dict[str, str] = {}
    for line in body.splitlines():
        if line.strip() == "Items:":
            break
        key, sep, value = line.partition(":")
        if sep:
            fields[key.strip()] = value.strip()
    return fields
