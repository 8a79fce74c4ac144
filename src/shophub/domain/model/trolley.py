"""Trolley: a customer's in-progress basket.

Invariant: the trolley never holds two lines for the same product id.
Adding a product that is already present increases that line's quantity.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from shophub.domain.exceptions import EntityNotFoundError, ValidationError
from shophub.domain.model.product import Product
from shophub.domain.model.product_list import format_product_list, total_of
from shophub.domain.model.value_objects import Money


class SortKey(Enum):
    ID = "id"
    PRICE = "price"
    PRICE_DESC = "price-desc"
    DESCRIPTION = "description"
    TOTAL_DESC = "total-desc"


_SORTS = {
    SortKey.ID: (lambda p: p.id, False),
    SortKey.PRICE: (lambda p: p.unit_price.amount, False),
    SortKey.PRICE_DESC: (lambda p: p.unit_price.amount, True),
    SortKey.DESCRIPTION: (lambda p: p.description, False),
    SortKey.TOTAL_DESC: (lambda p: p.line_total.amount, True),
}


class Trolley:

    def __init__(self, lines: Iterable[Product] = ()) -> None:
        self._lines: list[Product] = []
        for product in lines:
            self.add_product(product)

    # --- Mutations ------------------------------------------------------------

    def add_product(self, product: Product) -> None:
        """Add ``product`` (with its ordered quantity), merging by product id."""
        if product.ordered_quantity <= 0:
            raise ValidationError("Quantity must be positive")
        index = self._index_of(product.id)
        if index is None:
            self._lines.append(product)
        else:
            existing = self._lines[index]
            self._lines[index] = existing.with_ordered_quantity(
                existing.ordered_quantity + product.ordered_quantity
            )
        self._lines.sort()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        index = self._require(product_id)
        self._lines[index] = self._lines[index].with_ordered_quantity(quantity)

    def change_quantity(self, product_id: str, delta: int) -> None:
        """Adjust a line by ``delta``; a line that drops to zero is removed."""
        index = self._require(product_id)
        new_quantity = self._lines[index].ordered_quantity + delta
        if new_quantity > 0:
            self._lines[index] = self._lines[index].with_ordered_quantity(new_quantity)
        else:
            del self._lines[index]

    def remove_item(self, product_id: str) -> None:
        self._lines = [p for p in self._lines if p.id != product_id]

    def remove_products(self, product_ids: Iterable[str]) -> list[Product]:
        """Remove every listed id and return the lines that were removed."""
        ids = set(product_ids)
        removed = [p for p in self._lines if p.id in ids]
        self._lines = [p for p in self._lines if p.id not in ids]
        return removed

    def clamp_quantities(self, product_ids: Iterable[str], cap: int) -> None:
        ids = set(product_ids)
        self._lines = [
            p.with_ordered_quantity(cap) if p.id in ids and p.ordered_quantity > cap else p
            for p in self._lines
        ]

    def clear(self) -> None:
        self._lines.clear()

    def sort_by(self, key: SortKey) -> None:
        key_func, reverse = _SORTS[key]
        self._lines.sort(key=key_func, reverse=reverse)

    # --- Read access ----------------------------------------------------------

    @property
    def lines(self) -> tuple[Product, ...]:
        return tuple(self._lines)

    @property
    def total(self) -> Money:
        return total_of(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, product_id: str) -> Product | None:
        index = self._index_of(product_id)
        return None if index is None else self._lines[index]

    def display(self) -> str:
        return format_product_list(self._lines) if self._lines else ""

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Product]:
        return iter(tuple(self._lines))

    # --- Internal helpers -----------------------------------------------------

    def _index_of(self, product_id: str) -> int | None:
        for i, product in enumerate(self._lines):
            if product.id == product_id:
                return i
        return None

    def _require(self, product_id: str) -> int:
        index = self._index_of(product_id)
        if index is None:
            raise EntityNotFoundError(f"Product '{product_id}' is not in the trolley")
        return index
