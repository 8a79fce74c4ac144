"""Domain-level exceptions.

All business rule and storage failures are expressed as subclasses of
DomainException so the CLI layer can catch them uniformly and display
user-friendly messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shophub.domain.model.product import Product
    from shophub.domain.model.value_objects import Money


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AlreadyExistsError(DomainException):
    """An entity with the same identity already exists."""


class StorageError(DomainException):
    """The underlying storage failed (disk full, permissions, ...)."""


class MinimumSpendError(ValidationError):
    """The trolley total is below the minimum spend for the customer tier."""

    def __init__(self, actual: Money, required: Money) -> None:
        super().__init__(f"Payment of {actual} is below minimum of {required}")
        self.actual = actual
        self.required = required

    def user_message(self) -> str:
        shortfall = self.required - self.actual
        return (
            f"Minimum payment is {self.required}\n"
            f"Current total: {self.actual}\n"
            f"Please add {shortfall} more to proceed."
        )


class ExcessiveQuantityError(ValidationError):
    """One or more lines ask for more than the per-line cap.

    The requested quantities are captured when the error is raised, so the
    message can still show them after the trolley has been clamped.
    """

    def __init__(self, lines: list[Product], cap: int) -> None:
        super().__init__(f"{len(lines)} product(s) exceed maximum quantity of {cap}")
        self.lines = list(lines)
        self.cap = cap
        self.original_quantities = {p.id: p.ordered_quantity for p in lines}

    def user_message(self) -> str:
        parts = ["The following items exceed the maximum quantity limit:", ""]
        for p in self.lines:
            parts.append(f"- {p.id} - {p.description}")
            parts.append(
                f"  Requested: {self.original_quantities[p.id]} (Max allowed: {self.cap})"
            )
            parts.append(f"  Reduced to maximum: {self.cap}")
        parts.append("")
        parts.append("Quantities have been adjusted in your trolley.")
        parts.append("Please check out again to proceed with your order.")
        return "\n".join(parts)
