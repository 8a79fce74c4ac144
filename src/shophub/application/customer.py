"""Customer-side model: search, selection, trolley and checkout."""

from __future__ import annotations

import logging

from shophub.application.checkout import CheckoutHandler
from shophub.application.dto import CheckoutResult
from shophub.domain.exceptions import ValidationError
from shophub.domain.model.order import CustomerTier
from shophub.domain.model.product import Product
from shophub.domain.model.trolley import Trolley
from shophub.domain.repository.stock_service import StockService

logger = logging.getLogger(__name__)


class CustomerSession:
    """One customer's shopping session.

    Search accepts either a product ID or part of a description.  The first
    match that is in stock becomes the selected product, which is what
    ``add_to_trolley`` adds.
    """

    def __init__(
        self,
        stock_service: StockService,
        checkout_handler: CheckoutHandler,
        tier: CustomerTier = CustomerTier.STANDARD,
    ) -> None:
        self._stock_service = stock_service
        self._checkout_handler = checkout_handler
        self.tier = tier
        self.trolley = Trolley()
        self.selected: Product | None = None

    def search(self, keyword: str) -> list[Product]:
        matches = self._stock_service.search_product(keyword)
        self.selected = next((p for p in matches if p.stock_quantity > 0), None)
        if self.selected is None:
            logger.info("No product in stock for %r", keyword)
        return matches

    def select_product(self, product: Product) -> None:
        if product.stock_quantity <= 0:
            raise ValidationError(f"Product {product.id} is out of stock")
        self.selected = product

    def add_to_trolley(self, quantity: int = 1) -> None:
        if self.selected is None:
            raise ValidationError(
                "Please search for an available product before adding it to the trolley"
            )
        self.trolley.add_product(self.selected.with_ordered_quantity(quantity))

    def change_tier(self, tier: CustomerTier) -> None:
        self.tier = tier

    def cancel(self) -> None:
        self.trolley.clear()
        self.selected = None

    def checkout(self) -> CheckoutResult:
        result = self._checkout_handler.handle(self.trolley, self.tier)
        if result.ok:
            self.selected = None
        return result
