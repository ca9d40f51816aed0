"""
CLI Utilities - Shared helper functions for command line operations.

This module provides common functionality used across the commands,
including formatted printing, logging setup, and settings/graph loading.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from pydantic import BaseModel

from ..config import ResolverSettings
from ..core.exceptions import GraphUnavailableError
from ..core.graph import MappingGraphSource
from ..core.snapshot import load_snapshot


def echo_success(message: str, err: bool = False) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
        err (bool): Write to stderr, keeping stdout for machine-readable output.
    """
    click.echo(click.style(f"✅ {message}", fg="green"), err=err)


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str, err: bool = False) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"), err=err)


def configure_logging(verbose: bool) -> None:
    """Send library logging to stderr; DEBUG when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )


def load_settings(config_file: Optional[str]) -> ResolverSettings:
    """
    Load settings from an explicit file, or discover them in the working directory.

    Raises:
        ConfigError: If the settings file is malformed.
    """
    if config_file:
        return ResolverSettings.load(Path(config_file))
    return ResolverSettings.discover(Path.cwd())


def load_graph_source(graph_file: Optional[Path]) -> MappingGraphSource:
    """
    Load the snapshot a command should resolve against.

    Raises:
        GraphUnavailableError: If no snapshot was configured or it cannot be read.
    """
    if graph_file is None:
        raise GraphUnavailableError(
            "<none>", "no graph snapshot given; pass --graph or set 'graph' in anchorpack.toml"
        )
    return load_snapshot(graph_file)


def render_json(command: str, data: Optional[BaseModel] = None, error: Optional[Exception] = None) -> None:
    """
    Print the standard JSON envelope for ``--json`` output.

    Envelope: ``{"command", "status", "data", "error"}`` where exactly one of
    ``data`` / ``error`` is populated.
    """
    envelope = {
        "command": command,
        "status": "error" if error else "success",
        "data": data.model_dump(mode="json") if data is not None else None,
        "error": {"type": type(error).__name__, "message": str(error)} if error else None,
    }
    click.echo(json.dumps(envelope, indent=2))
