"""Output formatting."""

from .formatter import JSONFormatter, colorize

__all__ = ["JSONFormatter", "colorize"]
