"""Terminal payment dialog."""

from __future__ import annotations

import click

from shophub.application.checkout import PaymentPrompt
from shophub.application.dto import PaymentDecision
from shophub.domain.model.order import CustomerTier, PaymentMethod
from shophub.domain.model.value_objects import Money

PAYMENT_CHOICES = {
    "cash": PaymentMethod.CASH,
    "credit": PaymentMethod.CREDIT_CARD,
    "debit": PaymentMethod.DEBIT_CARD,
}


def click_payment_prompt(
    method: PaymentMethod | None = None,
    assume_yes: bool = False,
) -> PaymentPrompt:
    """Build a prompt that asks for a method (unless given) and a confirmation."""

    def prompt(amount: Money, tier: CustomerTier) -> PaymentDecision:
        if tier is CustomerTier.PRIME:
            click.echo(f"Final amount: {amount} (Prime discount -10% applied)")
        else:
            click.echo(f"Total amount: {amount}")

        chosen = method
        if chosen is None:
            key = click.prompt(
                "Payment method",
                type=click.Choice(list(PAYMENT_CHOICES), case_sensitive=False),
                default="credit",
            )
            chosen = PAYMENT_CHOICES[key.lower()]

        if not assume_yes and not click.confirm("Confirm payment?", default=True):
            return PaymentDecision.cancelled()
        return PaymentDecision.confirmed_with(chosen)

    return prompt
