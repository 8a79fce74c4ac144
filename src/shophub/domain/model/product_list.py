"""Receipt-like formatting of a list of products.

Used for the trolley display, the body of every order file and the
customer receipt, so all three stay in the same layout.
"""

from __future__ import annotations

from collections.abc import Iterable

from shophub.domain.model.product import Product
from shophub.domain.model.value_objects import Money

SEPARATOR_LENGTH = 44
LINE_SEPARATOR = "-" * SEPARATOR_LENGTH


def format_line(product: Product) -> str:
    # Description is left-aligned and truncated to 18 characters.
    return (
        f" {product.id:<7} {product.description[:18]:<18} "
        f"({product.ordered_quantity:2d}) £{product.line_total.amount:7.2f}"
    )


def total_of(products: Iterable[Product]) -> Money:
    result = Money.zero()
    for product in products:
        result = result + product.line_total
    return result


def format_product_list(products: Iterable[Product]) -> str:
    """Return one line per product, a separator and a Total line."""
    products = list(products)
    lines = [format_line(p) for p in products]
    lines.append(LINE_SEPARATOR)
    lines.append(f" {'Total':<35} £{total_of(products).amount:7.2f}")
    return "\n".join(lines) + "\n"
