"""OrderHub: the single authority over live orders.

The hub owns the in-memory order map (order id -> state), writes and moves
order files through the OrderStore, allocates ids, schedules the removal of
collected orders and notifies every registered observer.

Every public operation is executed on the hub's own worker thread, one at a
time, and the caller blocks for the result.  The delayed removal of a
Collected order is queued on the same worker, so it can never interleave
with a picker's transition.  Notifications are sent only after both the
file move and the map update have happened, in the order they happened.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from functools import partial
from types import MappingProxyType
from typing import TypeVar

from shophub.application.observers import (
    Dispatch,
    OrderMap,
    OrderMapObserver,
    dispatch_inline,
)
from shophub.domain.exceptions import EntityNotFoundError, StorageError, ValidationError
from shophub.domain.model.order import (
    ACTIONABLE_STATES,
    CustomerTier,
    Order,
    OrderState,
    PaymentMethod,
    parse_header,
)
from shophub.domain.model.product import Product
from shophub.domain.repository.order_id_generator import OrderIdGenerator
from shophub.domain.repository.order_store import OrderStore

logger = logging.getLogger(__name__)

COLLECTED_GRACE_PERIOD = 10.0  # seconds

T = TypeVar("T")


class OrderHub:

    def __init__(
        self,
        store: OrderStore,
        id_generator: OrderIdGenerator,
        grace_period: float = COLLECTED_GRACE_PERIOD,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._ids = id_generator
        self._grace_period = grace_period
        self._clock = clock

        # Worker-thread state: only touched from inside _call().
        self._order_map: dict[int, OrderState] = {}
        self._tiers: dict[int, CustomerTier] = {}
        self._trackers: list[tuple[OrderMapObserver, Dispatch]] = []
        self._pickers: list[tuple[OrderMapObserver, Dispatch]] = []
        self._removals: dict[int, tuple[threading.Timer, object]] = {}

        self._worker_ident: int | None = None
        self._executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="order-hub",
            initializer=self._mark_worker_thread,
        )
        self._closed = False
        self._close_lock = threading.Lock()

    # --- Lifecycle ------------------------------------------------------------

    def initialize(self) -> None:
        """Rebuild the order map from the Ordered, Progressing and Ready directories."""
        self._call(self._initialize)

    def shutdown(self) -> None:
        """Drop pending removals and stop the worker thread."""
        with self._close_lock:
            if self._closed:
                return
            self._call(self._cancel_all_removals)
            self._closed = True
            # The worker cannot wait for itself.
            on_worker = threading.get_ident() == self._worker_ident
            self._executor.shutdown(wait=not on_worker)
        logger.info("OrderHub shut down")

    def __enter__(self) -> OrderHub:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    # --- Public operations ----------------------------------------------------

    def new_order(
        self,
        line_items: Sequence[Product],
        customer_tier: CustomerTier,
        payment_method: PaymentMethod = PaymentMethod.CASH,
    ) -> Order:
        """Create an order in the Ordered state, persist it and notify observers."""
        return self._call(self._new_order, tuple(line_items), customer_tier, payment_method)

    def change_order_state(self, order_id: int, new_state: OrderState) -> None:
        """Move an order to ``new_state``; a no-op if it is already there."""
        self._call(self._change_order_state, order_id, new_state)

    def get_order_details(self, order_id: int) -> str:
        return self._call(self._get_order_details, order_id)

    def customer_tier(self, order_id: int) -> CustomerTier:
        return self._call(self._tiers.get, order_id, CustomerTier.STANDARD)

    def order_map(self) -> OrderMap:
        """Read-only snapshot of every live order."""
        return self._call(self._projection, None)

    def register_tracker(
        self, tracker: OrderMapObserver, dispatch: Dispatch | None = None
    ) -> None:
        """Add a tracker and immediately send it the full order map."""
        self._call(self._register, self._trackers, tracker, dispatch or dispatch_inline, None)

    def register_picker(
        self, picker: OrderMapObserver, dispatch: Dispatch | None = None
    ) -> None:
        """Add a picker and immediately send it the orders it can still act on."""
        self._call(
            self._register, self._pickers, picker, dispatch or dispatch_inline, ACTIONABLE_STATES
        )

    # --- Worker-thread implementations ----------------------------------------

    def _new_order(
        self,
        line_items: tuple[Product, ...],
        customer_tier: CustomerTier,
        payment_method: PaymentMethod,
    ) -> Order:
        if not line_items:
            raise ValidationError("Order must contain at least one item")

        order_id = self._ids.next_id()
        order = Order.create(
            order_id,
            line_items,
            customer_tier,
            payment_method,
            ordered_at=self._clock(),
        )
        # File first: if it fails the map is untouched and nobody is notified.
        self._store.create(self._store.path_for(OrderState.ORDERED), order_id, order.details())

        self._order_map[order_id] = order.state
        self._tiers[order_id] = customer_tier
        logger.info(
            "Order %d created (%s, %d line(s), total %s)",
            order_id, customer_tier.value, len(line_items), order.total,
        )
        self._notify_trackers()
        self._notify_pickers()
        return order

    def _change_order_state(self, order_id: int, new_state: OrderState) -> None:
        old_state = self._order_map.get(order_id)
        if old_state is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        if old_state is new_state:
            logger.debug("Order %d already %s", order_id, new_state.value)
            return

        self._store.update_and_move(
            order_id,
            new_state,
            self._store.path_for(old_state),
            self._store.path_for(new_state),
        )
        self._order_map[order_id] = new_state
        self._cancel_removal(order_id)
        logger.info("Order %d: %s -> %s", order_id, old_state.value, new_state.value)

        self._notify_trackers()
        self._notify_pickers()

        if new_state is OrderState.COLLECTED:
            self._schedule_removal(order_id)

    def _get_order_details(self, order_id: int) -> str:
        state = self._order_map.get(order_id)
        if state is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return self._store.read(self._store.path_for(state), order_id)

    def _initialize(self) -> None:
        self._cancel_all_removals()
        self._order_map.clear()
        self._tiers.clear()

        counts: dict[OrderState, int] = {}
        for state in (OrderState.ORDERED, OrderState.PROGRESSING, OrderState.READY):
            directory = self._store.path_for(state)
            ids = self._store.list_ids(directory)
            counts[state] = len(ids)
            for order_id in ids:
                if order_id in self._order_map:
                    logger.warning(
                        "Order %d found in both %s and %s",
                        order_id, self._order_map[order_id].value, state.value,
                    )
                self._order_map[order_id] = state
                self._tiers[order_id] = self._read_tier(directory, order_id)

        logger.info(
            "Order map initialised with %d order(s): %s",
            len(self._order_map),
            ", ".join(f"{n} {s.value}" for s, n in counts.items()),
        )
        self._notify_trackers()
        self._notify_pickers()

    def _register(
        self,
        registry: list[tuple[OrderMapObserver, Dispatch]],
        observer: OrderMapObserver,
        dispatch: Dispatch,
        states: frozenset[OrderState] | None,
    ) -> None:
        registry.append((observer, dispatch))
        self._deliver(observer, dispatch, self._projection(states))

    # --- Scheduled removal ----------------------------------------------------

    def _schedule_removal(self, order_id: int) -> None:
        token = object()
        timer = threading.Timer(
            self._grace_period, self._on_grace_period_elapsed, args=(order_id, token)
        )
        timer.daemon = True
        self._removals[order_id] = (timer, token)
        timer.start()
        logger.info("Order %d will leave the order map in %.1fs", order_id, self._grace_period)

    def _on_grace_period_elapsed(self, order_id: int, token: object) -> None:
        # Runs on the timer thread: hand the work to the hub's worker.
        try:
            self._executor.submit(self._remove_collected, order_id, token)
        except RuntimeError:
            logger.debug("Hub already shut down; dropping removal of order %d", order_id)

    def _remove_collected(self, order_id: int, token: object) -> None:
        entry = self._removals.get(order_id)
        if entry is None or entry[1] is not token:
            return
        del self._removals[order_id]
        # The state captured at schedule time must still hold.
        if self._order_map.get(order_id) is not OrderState.COLLECTED:
            return
        del self._order_map[order_id]
        self._tiers.pop(order_id, None)
        logger.info("Order %d removed from the order map", order_id)
        self._notify_trackers()

    def _cancel_removal(self, order_id: int) -> None:
        entry = self._removals.pop(order_id, None)
        if entry is not None:
            entry[0].cancel()
            logger.info("Pending removal of order %d cancelled", order_id)

    def _cancel_all_removals(self) -> None:
        for timer, _ in self._removals.values():
            timer.cancel()
        self._removals.clear()

    # --- Notification ---------------------------------------------------------

    def _notify_trackers(self) -> None:
        projection = self._projection(None)
        for observer, dispatch in self._trackers:
            self._deliver(observer, dispatch, projection)

    def _notify_pickers(self) -> None:
        projection = self._projection(ACTIONABLE_STATES)
        for observer, dispatch in self._pickers:
            self._deliver(observer, dispatch, projection)

    def _projection(self, states: frozenset[OrderState] | None) -> OrderMap:
        return MappingProxyType(
            {
                order_id: state
                for order_id, state in sorted(self._order_map.items())
                if states is None or state in states
            }
        )

    @staticmethod
    def _deliver(observer: OrderMapObserver, dispatch: Dispatch, projection: OrderMap) -> None:
        try:
            dispatch(partial(observer.on_order_map_updated, projection))
        except Exception:
            logger.exception("Observer %r failed to handle an order map update", observer)

    # --- Internal helpers -----------------------------------------------------

    def _read_tier(self, directory, order_id: int) -> CustomerTier:
        try:
            header = parse_header(self._store.read(directory, order_id))
        except StorageError as exc:
            logger.warning("Cannot read customer type of order %d: %s", order_id, exc)
            return CustomerTier.STANDARD
        raw = header.get("CustomerType")
        if raw is None:
            return CustomerTier.STANDARD
        try:
            return CustomerTier.parse(raw)
        except ValidationError:
            logger.warning("Order %d has unknown customer type %r", order_id, raw)
            return CustomerTier.STANDARD

    def _mark_worker_thread(self) -> None:
        self._worker_ident = threading.get_ident()

    def _call(self, fn: Callable[..., T], *args) -> T:
        # Calls made from the worker itself (e.g. an inline observer calling back) run directly.
        if threading.get_ident() == self._worker_ident:
            return fn(*args)
        return self._executor.submit(fn, *args).result()
