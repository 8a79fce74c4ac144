"""CLI commands for the warehouse picker."""

from __future__ import annotations

import click

from shophub.application.picker import PickerModel
from shophub.domain.exceptions import DomainException
from shophub.domain.model.order import OrderState
from shophub.infrastructure import bootstrap
from shophub.infrastructure.config import Settings

STATE_CHOICES = [s.value for s in OrderState]


@click.command("list")
@click.pass_obj
def picker_list(settings: Settings) -> None:
    """List orders that are Ordered, Progressing or Ready."""
    try:
        with bootstrap.order_hub(settings) as hub:
            picker = PickerModel(hub)
            picker.register()
            click.echo(picker.render())
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("details")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.pass_obj
def picker_details(settings: Settings, order_id: int) -> None:
    """Show the full contents of an order file."""
    try:
        with bootstrap.order_hub(settings) as hub:
            details = PickerModel(hub).order_details(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(details, nl=False)


@click.command("set-state")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--state",
    required=True,
    type=click.Choice(STATE_CHOICES, case_sensitive=False),
    help="Target state.",
)
@click.pass_obj
def picker_set_state(settings: Settings, order_id: int, state: str) -> None:
    """Move an order to another state."""
    new_state = OrderState.parse(state)
    try:
        with bootstrap.order_hub(settings) as hub:
            PickerModel(hub).change_order_state(order_id, new_state)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {new_state.value}")
