"""Product value.

Products come from the catalogue (stock service) and are copied into
trolleys and orders.  They are frozen so a search result, a trolley line
and an order line can never alias each other: changing a quantity always
produces a new Product.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from shophub.domain.exceptions import ValidationError
from shophub.domain.model.value_objects import Money


@dataclass(frozen=True)
class Product:
    """A catalogue product, optionally carrying an ordered quantity.

    ``ordered_quantity`` is only meaningful inside a trolley or an order
    line; ``stock_quantity`` is the amount the stock service reported.
    """

    id: str
    description: str
    image_name: str
    unit_price: Money
    stock_quantity: int = 0
    ordered_quantity: int = 1

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValidationError("Product ID is required")
        if self.stock_quantity < 0:
            raise ValidationError(
                f"Stock quantity cannot be negative, got {self.stock_quantity}"
            )

    def __lt__(self, other: Product) -> bool:
        return self.id < other.id

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.ordered_quantity

    def with_ordered_quantity(self, quantity: int) -> Product:
        return replace(self, ordered_quantity=quantity)

    def with_stock_quantity(self, quantity: int) -> Product:
        return replace(self, stock_quantity=quantity)

    def __str__(self) -> str:
        return (
            f"Id: {self.id}, {self.unit_price}/unit, stock: {self.stock_quantity}\n"
            f"{self.description}"
        )
