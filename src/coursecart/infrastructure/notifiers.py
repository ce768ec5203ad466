"""Notifier implementations for non-UI hosts."""

from __future__ import annotations

import logging

import click

from coursecart.application.notifier import Notifier

logger = logging.getLogger("coursecart.notices")


class LoggingNotifier(Notifier):
    """Routes notices to the log; for headless use."""

    def success(self, message: str) -> None:
        logger.info(message)

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)


class EchoNotifier(Notifier):
    """Prints notices to the terminal."""

    def success(self, message: str) -> None:
        click.secho(message, fg="green")

    def info(self, message: str) -> None:
        click.echo(message)

    def warning(self, message: str) -> None:
        click.secho(message, fg="yellow", err=True)

    def error(self, message: str) -> None:
        click.secho(message, fg="red", err=True)
