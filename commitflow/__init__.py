#!/usr/bin/env python3

from .main import cli, configure_logging
from .repo import Repository
from .shell import get_subprocess_env, run_command
from .workflow import run_workflow

__all__ = [
    "cli",
    "configure_logging",
    "Repository",
    "run_command",
    "get_subprocess_env",
    "run_workflow",
]
