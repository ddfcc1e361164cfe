# src/qamatch/cli/__init__.py
"""CLI package for qamatch.

The CLI is a thin Typer wrapper around the commands layer.
"""

from qamatch.cli.app import app, console

__all__ = ["app", "console"]
