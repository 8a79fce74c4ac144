"""CLI commands for the order tracker."""

from __future__ import annotations

import click

from shophub.application.tracker import OrderTracker
from shophub.domain.exceptions import DomainException
from shophub.infrastructure import bootstrap
from shophub.infrastructure.config import Settings


@click.command("show")
@click.pass_obj
def tracker_show(settings: Settings) -> None:
    """Show every live order and its state."""
    try:
        with bootstrap.order_hub(settings) as hub:
            tracker = OrderTracker(hub)
            tracker.register()
            click.echo(tracker.render())
    except DomainException as exc:
        raise click.ClickException(str(exc))
