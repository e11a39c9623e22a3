"""Configuration module for commitflow.

User configuration is read from the first of these that exists:
1. $COMMITFLOW_CONFIG_DIR/commitflowrc if $COMMITFLOW_CONFIG_DIR is defined
2. $XDG_CONFIG_HOME/commitflow/commitflowrc if $XDG_CONFIG_HOME is defined
3. $HOME/.commitflowrc

A ``commitflow.toml`` in the repository root is merged on top of it, so a
project can ship its own commit type catalog. Both files are TOML.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Optional

import tomli

from .message import DEFAULT_CATALOG, CommitCatalog, CommitTypeSpec

__all__ = [
    "PROJECT_CONFIG_FILE",
    "get_config_path",
    "load_config",
    "load_catalog",
    "get_logger_verbosity",
    "get_logger_path",
    "get_remote",
    "get_on_fetch_unavailable",
]

log = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "commitflow.toml"

FETCH_UNAVAILABLE_POLICIES = ("continue", "abort")

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "logger": {
        "verbosity": "INFO",
        "path": str(Path.home() / ".commitflow"),
    },
    "git": {
        "remote": "origin",
    },
    "sync": {
        "on_fetch_unavailable": "continue",
    },
    "commit": {
        "default_type": None,
        "types": [],
    },
}


def get_config_path() -> Path:
    """Return the path to the user's config file.

    Checks the following locations in order:
    1. $COMMITFLOW_CONFIG_DIR/commitflowrc if $COMMITFLOW_CONFIG_DIR is defined
    2. $XDG_CONFIG_HOME/commitflow/commitflowrc if $XDG_CONFIG_HOME is defined
    3. Fallback to $HOME/.commitflowrc
    """
    if "COMMITFLOW_CONFIG_DIR" in os.environ:
        path = Path(os.environ["COMMITFLOW_CONFIG_DIR"]) / "commitflowrc"
        if path.exists():
            return path

    if "XDG_CONFIG_HOME" in os.environ:
        path = Path(os.environ["XDG_CONFIG_HOME"]) / "commitflow" / "commitflowrc"
        if path.exists():
            return path

    return Path.home() / ".commitflowrc"


def _read_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        log.warning(f"Error loading config from {path}: {e}")
        return {}


def load_config(project_dir: Optional[str] = None) -> dict[str, Any]:
    """Load the merged configuration.

    Args:
        project_dir: Repository root to look for a project config file in

    Returns:
        Dict containing the defaults, overridden by the user config and then
        by the project config.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    _merge_configs(config, _read_toml(get_config_path()))
    if project_dir is not None:
        _merge_configs(config, _read_toml(Path(project_dir) / PROJECT_CONFIG_FILE))
    return config


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge override dict into base dict."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            nested_value: dict[str, Any] = value
            _merge_configs(base[key], nested_value)
        else:
            base[key] = value


def load_catalog(config: dict[str, Any]) -> CommitCatalog:
    """Build the commit type catalog from the ``[commit]`` section.

    Without any ``[[commit.types]]`` entries the default catalog is used,
    though ``default_type`` may still pick its default.

    Raises:
        ValueError: If an entry is incomplete or the catalog is inconsistent
    """
    section = config.get("commit", {})
    entries = section.get("types") or []
    default = section.get("default_type")

    if not entries:
        if default is None:
            return DEFAULT_CATALOG
        return CommitCatalog(DEFAULT_CATALOG, default=default)

    types = []
    for entry in entries:
        try:
            types.append(
                CommitTypeSpec(
                    label=str(entry["label"]),
                    symbol=str(entry["symbol"]),
                    description=str(entry.get("description", "")),
                )
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid commit type entry {entry!r}: {e}") from e
    return CommitCatalog(types, default=default)


def get_logger_verbosity(config: Optional[dict[str, Any]] = None) -> str:
    """Get the configured logger verbosity level (DEBUG, INFO, ...)."""
    config = config or load_config()
    return config["logger"]["verbosity"]


def get_logger_path(config: Optional[dict[str, Any]] = None) -> str:
    """Get the configured directory for log files, with ``~`` expanded."""
    config = config or load_config()
    return os.path.expanduser(config["logger"]["path"])


def get_remote(config: dict[str, Any]) -> str:
    return config["git"]["remote"]


def get_on_fetch_unavailable(config: dict[str, Any]) -> str:
    """Get what to do when the remote branch cannot be fetched.

    Returns:
        ``"continue"`` to commit and push anyway, or ``"abort"``

    Raises:
        ValueError: If the configured value is neither
    """
    policy = config["sync"]["on_fetch_unavailable"]
    if policy not in FETCH_UNAVAILABLE_POLICIES:
        raise ValueError(
            f"sync.on_fetch_unavailable must be one of {FETCH_UNAVAILABLE_POLICIES}, got {policy!r}"
        )
    return policy
