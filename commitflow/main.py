#!/usr/bin/env python3

import asyncio
import logging
import os
import sys
from typing import List, Optional, Tuple

import click

from . import output
from .config import (
    get_logger_path,
    get_logger_verbosity,
    get_on_fetch_unavailable,
    get_remote,
    load_catalog,
    load_config,
)
from .prompts import collect_answer
from .repo import Repository, is_git_directory
from .workflow import run_workflow

__all__ = ["cli", "configure_logging", "resolve_log_level"]


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_log_level(config: Optional[dict] = None) -> int:
    """Pick the log level: COMMITFLOW_DEBUG, then COMMITFLOW_DEBUG_LEVEL, then
    the config file. Unknown names fall back to INFO."""
    if os.environ.get("COMMITFLOW_DEBUG"):
        return logging.DEBUG
    name = (
        os.environ.get("COMMITFLOW_DEBUG_LEVEL") or get_logger_verbosity(config)
    ).upper()
    return getattr(logging, name) if name in LOG_LEVELS else logging.INFO


def configure_logging(log_file: str = "commitflow.log", config: Optional[dict] = None) -> None:
    """Send logs to ``<logger.path>/commitflow.log`` (``~/.commitflow`` by default).

    The terminal belongs to the colored feedback, so a console handler is
    only added when COMMITFLOW_DEBUG is set.
    """
    log_dir = get_logger_path(config)
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, log_file)
    log_level = resolve_log_level(config)

    handlers: List[logging.Handler] = [logging.FileHandler(log_path)]
    if os.environ.get("COMMITFLOW_DEBUG"):
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.info(
        f"Logging to {log_path} at {logging.getLevelName(log_level)}"
    )


@click.command()
@click.argument("files", nargs=-1, type=click.Path())
def cli(files: Tuple[str, ...]) -> None:
    """Sync with the remote, then commit and push with a structured message.

    FILES, when given, limit the commit to those paths.
    """
    path = os.getcwd()
    if not is_git_directory(path):
        output.error(f"Not a git repository: {path}")
        sys.exit(1)

    try:
        config = load_config(path)
        configure_logging(config=config)
        catalog = load_catalog(config)
        on_fetch_unavailable = get_on_fetch_unavailable(config)
    except ValueError as e:
        output.error(f"Invalid configuration: {e}")
        sys.exit(1)

    repo = Repository(path, remote=get_remote(config))
    logging.info(f"Starting commit workflow in {repo}")

    try:
        result = asyncio.run(
            run_workflow(
                repo,
                catalog,
                collect_answer,
                files=list(files) or None,
                on_fetch_unavailable=on_fetch_unavailable,
            )
        )
    except (RuntimeError, ValueError) as e:
        logging.error("Commit workflow failed", exc_info=True)
        output.error(str(e))
        sys.exit(1)

    sys.exit(result.exit_code)
