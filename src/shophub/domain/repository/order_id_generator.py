"""Abstract source of order identifiers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class OrderIdGenerator(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Return a fresh order ID, strictly greater than any issued before."""
