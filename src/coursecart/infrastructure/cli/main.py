import logging

import click

from coursecart.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
)
from coursecart.infrastructure.cli.catalog_commands import catalog_categories, catalog_list
from coursecart.infrastructure.cli.educator_commands import (
    educator_dashboard,
    educator_students,
    educator_sync,
    educator_toggle,
)
from coursecart.infrastructure.cli.purchase_commands import (
    pending_cancel,
    pending_count,
    pending_list,
    pending_retry,
    purchase_cart,
    purchase_course,
)
from coursecart.domain.exceptions import DomainException
from coursecart.infrastructure.config import get_settings


@click.group()
def cli() -> None:
    """coursecart — course marketplace cart and purchases"""
    try:
        settings = get_settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def catalog() -> None:
    """Browse the course catalog."""


@cli.group()
def purchase() -> None:
    """Start a checkout."""


@cli.group()
def pending() -> None:
    """Manage pending purchases."""


@cli.group()
def educator() -> None:
    """Educator dashboard."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
catalog.add_command(catalog_categories)
catalog.add_command(catalog_list)
purchase.add_command(purchase_cart)
purchase.add_command(purchase_course)
pending.add_command(pending_cancel)
pending.add_command(pending_count)
pending.add_command(pending_list)
pending.add_command(pending_retry)
educator.add_command(educator_dashboard)
educator.add_command(educator_students)
educator.add_command(educator_sync)
educator.add_command(educator_toggle)
