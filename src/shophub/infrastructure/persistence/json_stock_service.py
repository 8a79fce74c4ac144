"""JSON-file-backed implementation of StockService.

The catalogue file is a list of records::

    {"id": "0001", "description": "40 inch TV", "image": "0001.jpg",
     "price": "269.00", "stock": 10}
"""

from __future__ import annotations

import json
import logging
import threading
from decimal import Decimal
from pathlib import Path

from shophub.domain.exceptions import StorageError, ValidationError
from shophub.domain.model.product import Product
from shophub.domain.model.value_objects import Money
from shophub.domain.repository.stock_service import StockService

logger = logging.getLogger(__name__)


class JsonStockService(StockService):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- StockService interface -----------------------------------------------

    def search_product(self, keyword: str) -> list[Product]:
        keyword = keyword.strip()
        if not keyword:
            return []
        products = self._load()
        exact = products.get(keyword)
        if exact is not None:
            return [exact]
        needle = keyword.lower()
        return [p for p in products.values() if needle in p.description.lower()]

    def get_product(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def purchase_stocks(self, lines: list[Product]) -> list[Product]:
        """Two-phase purchase: check every line, then decrement and persist once."""
        with self._lock:
            products = self._load()

            # Phase 1: validate without mutating anything
            shortages: list[Product] = []
            for line in lines:
                available = products[line.id].stock_quantity if line.id in products else 0
                if line.ordered_quantity > available:
                    shortages.append(line.with_stock_quantity(available))
            if shortages:
                logger.info(
                    "Purchase rejected, short on %s", ", ".join(p.id for p in shortages)
                )
                return shortages

            # Phase 2: mutate and persist
            for line in lines:
                current = products[line.id]
                products[line.id] = current.with_stock_quantity(
                    current.stock_quantity - line.ordered_quantity
                )
            self._persist(products)
            return []

    def release_stocks(self, lines: list[Product]) -> None:
        with self._lock:
            products = self._load()
            for line in lines:
                current = products.get(line.id)
                if current is None:
                    raise ValidationError(f"Cannot release stock for unknown product '{line.id}'")
                products[line.id] = current.with_stock_quantity(
                    current.stock_quantity + line.ordered_quantity
                )
            self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read catalogue {self._file_path}: {exc}") from exc
        return {
            item["id"]: Product(
                id=item["id"],
                description=item["description"],
                image_name=item.get("image", f"{item['id']}.jpg"),
                unit_price=Money(Decimal(item["price"])),
                stock_quantity=item["stock"],
            )
            for item in raw
        }

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [
            {
                "id": p.id,
                "description": p.description,
                "image": p.image_name,
                "price": str(p.unit_price.amount),
                "stock": p.stock_quantity,
            }
            for p in products.values()
        ]
        try:
            self._file_path.write_text(
                json.dumps(raw, indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise StorageError(f"Cannot write catalogue {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
