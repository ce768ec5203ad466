"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from coursecart.infrastructure.bootstrap import Client
from coursecart.infrastructure.cli.runtime import ensure_success, run


@click.command("show")
def cart_show() -> None:
    """Show the courses in the cart."""

    async def action(client: Client) -> None:
        items = client.cart.items
        if not items:
            click.echo("Your cart is empty.")
            return

        click.echo(f"{'ID':<26} {'Course':<30} {'Price':>10}")
        click.echo("-" * 68)
        for item in items:
            course = item.course
            click.echo(f"{course.id:<26} {course.title[:30]:<30} {str(course.final_price):>10}")
        click.echo("-" * 68)
        click.echo(f"{'Total':<57} {str(client.cart.total()):>10}")

    run(action)


@click.command("add")
@click.option("--course", "course_id", required=True, help="Course ID to add.")
def cart_add(course_id: str) -> None:
    """Add a course from the catalog to the cart."""

    async def action(client: Client) -> None:
        ensure_success(await client.catalog.refresh())
        course = client.catalog.get(course_id)
        if course is None:
            raise click.ClickException(f"Course '{course_id}' not found in the catalog")

        identity = client.configured_identity()
        if identity is not None:
            client.session.attach_identity(identity)
            await client.session.refresh_enrollments()
        ensure_success(client.cart.add(course, client.session.enrolled_course_ids))

    run(action)


@click.command("remove")
@click.option("--course", "course_id", required=True, help="Course ID to remove.")
def cart_remove(course_id: str) -> None:
    """Remove a course from the cart."""

    async def action(client: Client) -> None:
        ensure_success(client.cart.remove(course_id))

    run(action)


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""

    async def action(client: Client) -> None:
        ensure_success(client.cart.clear())

    run(action)
