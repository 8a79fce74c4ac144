"""CLI commands for the customer role."""

from __future__ import annotations

import click

from shophub.application.dto import OrderItemSpec
from shophub.domain.exceptions import DomainException
from shophub.domain.model.order import CustomerTier
from shophub.infrastructure import bootstrap
from shophub.infrastructure.cli.payment import PAYMENT_CHOICES, click_payment_prompt
from shophub.infrastructure.config import Settings

TIER_CHOICES = [t.value for t in CustomerTier]


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '0001:3,0002:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


@click.command("search")
@click.argument("keyword")
@click.pass_obj
def customer_search(settings: Settings, keyword: str) -> None:
    """Search the catalogue by product ID or description."""
    try:
        products = bootstrap.stock_service(settings).search_product(keyword)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo(f"No product was found for '{keyword}'")
        return

    click.echo(f"{'ID':<6} {'Description':<24} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 49)
    for p in products:
        click.echo(f"{p.id:<6} {p.description[:24]:<24} {str(p.unit_price):>10} {p.stock_quantity:>6}")


@click.command("checkout")
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
@click.option(
    "--tier",
    type=click.Choice(TIER_CHOICES, case_sensitive=False),
    default=CustomerTier.STANDARD.value,
    show_default=True,
    help="Customer tier.",
)
@click.option(
    "--payment",
    type=click.Choice(list(PAYMENT_CHOICES), case_sensitive=False),
    default=None,
    help="Payment method (prompted for if omitted).",
)
@click.option("--yes", "assume_yes", is_flag=True, default=False, help="Confirm payment without asking.")
@click.option("--save-receipt", is_flag=True, default=False, help="Also write the receipt to a file.")
@click.pass_obj
def customer_checkout(
    settings: Settings,
    items: str,
    tier: str,
    payment: str | None,
    assume_yes: bool,
    save_receipt: bool,
) -> None:
    """Fill a trolley and check it out."""
    specs = _parse_items(items)
    method = PAYMENT_CHOICES[payment.lower()] if payment else None

    try:
        with bootstrap.order_hub(settings) as hub:
            session = bootstrap.customer_session(
                settings,
                hub,
                click_payment_prompt(method, assume_yes),
                CustomerTier.parse(tier),
            )
            for spec in specs:
                session.search(spec.product_id)
                if session.selected is None or session.selected.id != spec.product_id:
                    raise click.ClickException(f"Product {spec.product_id} is not available")
                session.add_to_trolley(spec.quantity)
            result = session.checkout()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.ok:
        raise click.ClickException(result.message())

    click.echo(result.receipt.render())
    if save_receipt:
        path = result.receipt.save(settings.receipts_dir)
        click.echo(f"Receipt saved to {path}")
