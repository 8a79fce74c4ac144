"""Abstract stock service.

The catalogue and its stock levels belong to an external collaborator;
the shop only consumes product lookup and transactional stock purchase.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shophub.domain.model.product import Product


class StockService(ABC):

    @abstractmethod
    def search_product(self, keyword: str) -> list[Product]:
        """Return products whose ID equals ``keyword`` or whose description contains it."""

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def purchase_stocks(self, lines: list[Product]) -> list[Product]:
        """Decrement stock for every line, all or nothing.

        Returns an empty list on success.  Otherwise returns the short lines
        (``stock_quantity`` = available, ``ordered_quantity`` = requested)
        and leaves every stock level untouched.
        """

    @abstractmethod
    def release_stocks(self, lines: list[Product]) -> None:
        """Put back stock taken by an earlier successful purchase."""
