"""Interactive single-process session.

Customer, picker and tracker share one OrderHub, so a picker's state change
shows up in the tracker (and a collected order drops off it after the grace
period) without restarting anything.  Notifications are queued and printed
between commands.
"""

from __future__ import annotations

import shlex

import click

from shophub.application.observers import QueueDispatcher
from shophub.application.order_hub import OrderHub
from shophub.application.picker import PickerModel, PickerRow
from shophub.application.tracker import OrderTracker, TrackerRow
from shophub.domain.exceptions import DomainException
from shophub.domain.model.order import CustomerTier, OrderState
from shophub.domain.model.trolley import SortKey
from shophub.infrastructure import bootstrap
from shophub.infrastructure.cli.payment import click_payment_prompt
from shophub.infrastructure.config import Settings

HELP = """\
Customer:  search KEYWORD | add [QTY] | trolley | qty ID N | change ID DELTA
           remove ID | sort KEY | tier Standard|VIP|Prime | checkout | cancel
Picker:    orders | details ID | state ID Ordered|Progressing|Ready|Collected
Tracker:   track
Other:     help | quit"""


class Shell:

    def __init__(self, settings: Settings, hub: OrderHub) -> None:
        self._settings = settings
        self._hub = hub
        self._dispatcher = QueueDispatcher()
        self._session = bootstrap.customer_session(settings, hub, click_payment_prompt())
        self._picker = PickerModel(hub, self._dispatcher, on_change=self._picker_changed)
        self._tracker = OrderTracker(hub, self._dispatcher, on_change=self._tracker_changed)
        self._commands = {
            "search": self._search,
            "add": self._add,
            "trolley": self._show_trolley,
            "qty": self._set_quantity,
            "change": self._change_quantity,
            "remove": self._remove,
            "sort": self._sort,
            "tier": self._tier,
            "checkout": self._checkout,
            "cancel": self._cancel,
            "orders": self._orders,
            "details": self._details,
            "state": self._state,
            "track": self._track,
        }

    def run(self) -> None:
        self._picker.register()
        self._tracker.register()
        self._dispatcher.run_pending()
        click.echo(HELP)

        while True:
            self._dispatcher.run_pending()
            try:
                line = click.prompt("shophub", prompt_suffix="> ", default="", show_default=False)
            except click.Abort:
                break
            try:
                words = shlex.split(line)
            except ValueError as exc:
                click.echo(f"Error: {exc}", err=True)
                continue
            if not words:
                continue
            name, args = words[0].lower(), words[1:]
            if name in ("quit", "exit"):
                break
            if name == "help":
                click.echo(HELP)
                continue
            command = self._commands.get(name)
            if command is None:
                click.echo(f"Unknown command '{name}'. Type 'help'.", err=True)
                continue
            try:
                command(*args)
            except DomainException as exc:
                click.echo(f"Error: {exc}", err=True)
            except (TypeError, ValueError):
                click.echo(f"Bad arguments for '{name}'. Type 'help'.", err=True)
            self._dispatcher.run_pending()

    # --- Customer -------------------------------------------------------------

    def _search(self, *words: str) -> None:
        matches = self._session.search(" ".join(words))
        if not matches:
            click.echo("No product was found")
            return
        for p in matches:
            click.echo(f"  {p.id:<6} {p.description:<24} {p.unit_price}  stock {p.stock_quantity}")
        selected = self._session.selected
        if selected is None:
            click.echo("None of these are in stock.")
        else:
            click.echo(f"Selected {selected.id} {selected.description}")

    def _add(self, quantity: str = "1") -> None:
        self._session.add_to_trolley(int(quantity))
        self._show_trolley()

    def _show_trolley(self) -> None:
        click.echo(self._session.trolley.display() or "Your trolley is empty")

    def _set_quantity(self, product_id: str, quantity: str) -> None:
        self._session.trolley.set_quantity(product_id, int(quantity))
        self._show_trolley()

    def _change_quantity(self, product_id: str, delta: str) -> None:
        self._session.trolley.change_quantity(product_id, int(delta))
        self._show_trolley()

    def _remove(self, product_id: str) -> None:
        self._session.trolley.remove_item(product_id)
        self._show_trolley()

    def _sort(self, key: str) -> None:
        self._session.trolley.sort_by(SortKey(key.lower()))
        self._show_trolley()

    def _tier(self, tier: str) -> None:
        self._session.change_tier(CustomerTier.parse(tier))
        click.echo(f"Customer tier: {self._session.tier.value}")

    def _checkout(self) -> None:
        result = self._session.checkout()
        click.echo(result.message())
        if not result.ok:
            self._show_trolley()
        elif click.confirm("Save receipt to file?", default=False):
            click.echo(f"Receipt saved to {result.receipt.save(self._settings.receipts_dir)}")

    def _cancel(self) -> None:
        self._session.cancel()
        click.echo("Trolley cleared.")

    # --- Picker ---------------------------------------------------------------

    def _orders(self) -> None:
        click.echo(self._picker.render())

    def _details(self, order_id: str) -> None:
        click.echo(self._picker.order_details(int(order_id)), nl=False)

    def _state(self, order_id: str, state: str) -> None:
        self._picker.change_order_state(int(order_id), OrderState.parse(state))

    def _picker_changed(self, rows: list[PickerRow]) -> None:
        click.echo(f"[picker] {len(rows)} order(s) to pick")

    # --- Tracker --------------------------------------------------------------

    def _track(self) -> None:
        click.echo(self._tracker.render())

    def _tracker_changed(self, rows: list[TrackerRow]) -> None:
        summary = ", ".join(f"#{row.order_id} {row.state.value}" for row in rows) or "none"
        click.echo(f"[tracker] {summary}")
