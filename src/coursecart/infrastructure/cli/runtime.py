"""Shared plumbing for CLI commands: build a client, run a coroutine, close."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from coursecart.application.dto import ActionResult, CheckoutResult
from coursecart.infrastructure.bootstrap import Client, build_client
from coursecart.infrastructure.notifiers import EchoNotifier

T = TypeVar("T")


def run(action: Callable[[Client], Awaitable[T]], sign_in: bool = False) -> T:
    """Run *action* against a freshly wired client.

    With ``sign_in`` the configured identity is signed in first, which runs
    the session start-up sequence.
    """

    async def _main() -> T:
        client = build_client(notifier=EchoNotifier())
        try:
            if sign_in:
                identity = client.configured_identity()
                if identity is None:
                    raise click.ClickException(
                        "No identity configured. Set COURSECART_TOKEN to sign in."
                    )
                await client.session.sign_in(identity)
            return await action(client)
        finally:
            await client.aclose()

    return asyncio.run(_main())


def ensure_success(result: ActionResult | CheckoutResult) -> None:
    """Exit non-zero for a failed result; the notice was already shown."""
    if not result.success:
        raise click.ClickException(result.error or "Request failed")
