"""CLI commands for checkout and pending purchases."""

from __future__ import annotations

import click

from coursecart.application.dto import CheckoutResult
from coursecart.infrastructure.bootstrap import Client
from coursecart.infrastructure.cli.runtime import ensure_success, run


def _display_checkout(result: CheckoutResult) -> None:
    ensure_success(result)
    if result.total_amount:
        click.echo(f"Total:    {result.total_amount} for {result.course_count} course(s)")
    click.echo(f"Checkout: {result.session_url}")


@click.command("course")
@click.option("--course", "course_id", required=True, help="Course ID to buy.")
def purchase_course(course_id: str) -> None:
    """Start checkout for a single course."""

    async def action(client: Client) -> None:
        result = await client.purchases.purchase_single(course_id)
        if result.is_pending_purchase:
            click.echo("See `coursecart pending list` to continue or cancel it.")
        _display_checkout(result)

    run(action, sign_in=True)


@click.command("cart")
def purchase_cart() -> None:
    """Start checkout for everything in the cart."""

    async def action(client: Client) -> None:
        _display_checkout(await client.purchases.purchase_cart())

    run(action, sign_in=True)


@click.command("list")
def pending_list() -> None:
    """List purchases that are not settled yet."""

    async def action(client: Client) -> None:
        records = client.pending.records
        if not records:
            click.echo("No pending purchases.")
            return

        click.echo(f"{'Purchase':<26} {'Course':<30} {'Amount':>10} {'Status':>11}")
        click.echo("-" * 80)
        for record in records:
            title = record.course.title if record.course else "-"
            click.echo(
                f"{record.id:<26} {title[:30]:<30} {str(record.amount):>10} "
                f"{record.status.value:>11}"
            )

    run(action, sign_in=True)


@click.command("count")
def pending_count() -> None:
    """Show how many purchases are pending."""

    async def action(client: Client) -> None:
        click.echo(str(client.pending.pending_count or 0))

    run(action, sign_in=True)


@click.command("retry")
@click.option("--id", "purchase_id", required=True, help="Purchase ID to retry.")
def pending_retry(purchase_id: str) -> None:
    """Open a new checkout session for a pending purchase."""

    async def action(client: Client) -> None:
        _display_checkout(await client.pending.retry(purchase_id))

    run(action, sign_in=True)


@click.command("cancel")
@click.option("--id", "purchase_id", required=True, help="Purchase ID to cancel.")
@click.confirmation_option(prompt="Cancel this purchase? This cannot be undone.")
def pending_cancel(purchase_id: str) -> None:
    """Cancel a pending purchase."""

    async def action(client: Client) -> None:
        ensure_success(await client.pending.cancel(purchase_id))

    run(action, sign_in=True)
