"""Command-line interface for Holocron."""

from .core import cli, main

__all__ = ["cli", "main"]
