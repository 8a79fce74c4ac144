"""Abstract store for order files.

The persisted state of an order is the directory its file lives in; the
``State:`` header inside the file is only an echo for humans.  Defined in
the domain layer so the hub never depends on a concrete filesystem layout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from shophub.domain.model.order import OrderState


class OrderStore(ABC):

    @abstractmethod
    def path_for(self, state: OrderState) -> Path:
        """Return the directory that holds orders in ``state``."""

    @abstractmethod
    def create(self, directory: Path, order_id: int, body: str) -> None:
        """Write a new order file; raise AlreadyExistsError if present."""

    @abstractmethod
    def read(self, directory: Path, order_id: int) -> str:
        """Return an order file's body; raise EntityNotFoundError if absent."""

    @abstractmethod
    def update_and_move(
        self,
        order_id: int,
        new_state: OrderState,
        source_dir: Path,
        target_dir: Path,
    ) -> None:
        """Rewrite the state header and move the file as one logical step."""

    @abstractmethod
    def list_ids(self, directory: Path) -> list[int]:
        """Return the ids of every parseable order file in ``directory``."""
