"""
Web Scraping Layer.

This package contains modules for fetching a card page and pulling its JSON
payload out of whatever shape the server returns.
"""

from .payload_locator import PayloadLocator

__all__ = ["PayloadLocator"]
