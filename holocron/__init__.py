"""Holocron - track books from wishlist to archive."""

__version__ = "0.1.0"
