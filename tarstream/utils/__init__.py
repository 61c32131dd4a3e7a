"""Utility package for extraction helpers."""

from .format import format_duration, format_size
from .progress_bar import ProgressReader, SimpleProgressBar

__all__ = [
    "ProgressReader",
    "SimpleProgressBar",
    "format_duration",
    "format_size",
]
