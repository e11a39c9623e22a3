#!/usr/bin/env python3

"""Colored, human-readable feedback for the terminal.

Messages are advisory text only; each is also written to the log.
"""

import logging

import click

__all__ = ["warn", "info", "success", "error"]

log = logging.getLogger(__name__)


def warn(text: str) -> None:
    log.warning(text)
    click.secho(text, fg="yellow", err=True)


def info(text: str) -> None:
    log.info(text)
    click.secho(text, fg="cyan")


def success(text: str) -> None:
    log.info(text)
    click.secho(text, fg="green")


def error(text: str) -> None:
    log.error(text)
    click.secho(text, fg="red", err=True)
