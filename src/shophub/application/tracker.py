"""OrderTracker: read-only, colour-coded list of every live order."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from shophub.application.observers import Dispatch, OrderMap, OrderMapObserver
from shophub.application.order_hub import OrderHub
from shophub.domain.model.order import OrderState

STATE_COLOURS: dict[OrderState, str] = {
    OrderState.ORDERED: "#FFE5B4",
    OrderState.PROGRESSING: "#AED6F1",
    OrderState.READY: "#A9DFBF",
    OrderState.COLLECTED: "#D5D8DC",
}


@dataclass(frozen=True)
class TrackerRow:
    order_id: int
    state: OrderState

    @property
    def colour(self) -> str:
        return STATE_COLOURS[self.state]


class OrderTracker(OrderMapObserver):

    def __init__(
        self,
        hub: OrderHub,
        dispatch: Dispatch | None = None,
        on_change: Callable[[list[TrackerRow]], None] | None = None,
    ) -> None:
        self._hub = hub
        self._dispatch = dispatch
        self._on_change = on_change
        self._order_map: dict[int, OrderState] = {}

    def register(self) -> None:
        self._hub.register_tracker(self, self._dispatch)

    def on_order_map_updated(self, projection: OrderMap) -> None:
        self._order_map = dict(projection)
        if self._on_change is not None:
            self._on_change(self.rows())

    def rows(self) -> list[TrackerRow]:
        return [TrackerRow(order_id, state) for order_id, state in self._order_map.items()]

    def render(self) -> str:
        if not self._order_map:
            return "No orders."
        lines = [f"{'Order':<8} {'State':<12}", "-" * 21]
        lines.extend(f"{row.order_id:<8} {row.state.value:<12}" for row in self.rows())
        return "\n".join(lines)
