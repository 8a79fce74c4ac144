"""PickerModel: the picker's view of the orders still to be handled.

The picker never changes its local copy of the order map.  A state change
goes to the OrderHub, and the picker's rows only change when the hub sends
the next projection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from shophub.application.observers import Dispatch, OrderMap, OrderMapObserver
from shophub.application.order_hub import OrderHub
from shophub.domain.model.order import CustomerTier, OrderState

logger = logging.getLogger(__name__)

_BADGES = {
    CustomerTier.STANDARD: "",
    CustomerTier.VIP: " [VIP]",
    CustomerTier.PRIME: " [Prime]",
}


@dataclass(frozen=True)
class PickerRow:
    order_id: int
    state: OrderState
    tier: CustomerTier

    @property
    def label(self) -> str:
        return f"Order #{self.order_id}{_BADGES[self.tier]}"


class PickerModel(OrderMapObserver):

    def __init__(
        self,
        hub: OrderHub,
        dispatch: Dispatch | None = None,
        on_change: Callable[[list[PickerRow]], None] | None = None,
    ) -> None:
        self._hub = hub
        self._dispatch = dispatch
        self._on_change = on_change
        self._order_map: dict[int, OrderState] = {}
        self._tiers: dict[int, CustomerTier] = {}

    def register(self) -> None:
        self._hub.register_picker(self, self._dispatch)

    # --- OrderMapObserver -----------------------------------------------------

    def on_order_map_updated(self, projection: OrderMap) -> None:
        self._order_map = dict(projection)
        self._tiers = {k: v for k, v in self._tiers.items() if k in self._order_map}
        logger.debug("Picker received %d order(s)", len(self._order_map))
        if self._on_change is not None:
            self._on_change(self.rows())

    # --- Actions --------------------------------------------------------------

    def change_order_state(self, order_id: int, new_state: OrderState) -> None:
        self._hub.change_order_state(order_id, new_state)

    def order_details(self, order_id: int) -> str:
        return self._hub.get_order_details(order_id)

    # --- Read access ----------------------------------------------------------

    def rows(self) -> list[PickerRow]:
        return [
            PickerRow(order_id, state, self._tier_of(order_id))
            for order_id, state in self._order_map.items()
        ]

    def render(self) -> str:
        if not self._order_map:
            return "No orders to pick."
        return "\n".join(f"{row.label:<22} {row.state.value}" for row in self.rows())

    def _tier_of(self, order_id: int) -> CustomerTier:
        if order_id not in self._tiers:
            self._tiers[order_id] = self._hub.customer_tier(order_id)
        return self._tiers[order_id]
