"""CLI module for tarstream.

This module contains the command-line interface components including
the Typer application and command orchestration logic.
"""

from tarstream.cli.parser import app

__all__ = ["app"]
