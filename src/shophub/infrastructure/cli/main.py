import click

from shophub.domain.exceptions import DomainException
from shophub.infrastructure import bootstrap
from shophub.infrastructure.cli.customer_commands import customer_checkout, customer_search
from shophub.infrastructure.cli.picker_commands import (
    picker_details,
    picker_list,
    picker_set_state,
)
from shophub.infrastructure.cli.shell import Shell
from shophub.infrastructure.cli.tracker_commands import tracker_show
from shophub.infrastructure.config import ConfigurationError, Settings, load_settings
from shophub.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ShopHub: shop, pick and track orders."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@cli.group()
def customer() -> None:
    """Search the catalogue and check out."""


@cli.group()
def picker() -> None:
    """Work through placed orders."""


@cli.group()
def tracker() -> None:
    """Watch order progress."""


@cli.command("shell")
@click.pass_obj
def shell(settings: Settings) -> None:
    """Run customer, picker and tracker in one interactive session."""
    try:
        with bootstrap.order_hub(settings) as hub:
            Shell(settings, hub).run()
    except DomainException as exc:
        raise click.ClickException(str(exc))


# Register subcommands
customer.add_command(customer_search)
customer.add_command(customer_checkout)
picker.add_command(picker_list)
picker.add_command(picker_details)
picker.add_command(picker_set_state)
tracker.add_command(tracker_show)
