"""Command pattern implementations for tarstream operations."""

from tarstream.commands.command import Command
from tarstream.commands.extract import ExtractCommand

__all__ = ["Command", "ExtractCommand"]
