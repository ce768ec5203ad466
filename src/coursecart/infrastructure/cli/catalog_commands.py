"""CLI commands for the course catalog."""

from __future__ import annotations

import click

from coursecart.infrastructure.bootstrap import Client
from coursecart.infrastructure.cli.runtime import ensure_success, run


@click.command("list")
def catalog_list() -> None:
    """Fetch and list every published course."""

    async def action(client: Client) -> None:
        ensure_success(await client.catalog.refresh())
        catalog = client.catalog
        if not catalog.courses:
            click.echo("No courses found.")
            return

        click.echo(f"{'ID':<26} {'Course':<30} {'Price':>10} {'Rating':>7} {'Weeks':>6}")
        click.echo("-" * 83)
        for course in catalog.courses:
            click.echo(
                f"{course.id:<26} {course.title[:30]:<30} {str(course.final_price):>10} "
                f"{catalog.rating(course):>7.1f} {catalog.duration_weeks(course):>6}"
            )

    run(action)


@click.command("categories")
@click.option("--with-courses", is_flag=True, default=False, help="Include each category's courses.")
def catalog_categories(with_courses: bool) -> None:
    """List course categories."""

    async def action(client: Client) -> None:
        categories = await client.catalog.fetch_categories(with_courses=with_courses)
        if not categories:
            click.echo("No categories found.")
            return
        for category in categories:
            click.echo(f"{category.name} ({category.course_count})")
            for course in category.courses:
                click.echo(f"  - {course.title}")

    run(action)
