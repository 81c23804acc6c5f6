"""
Media Processing Layer.

This package is responsible for fetching remote assets, resolving audio file
extensions, and rendering the plain-text metadata reports.
"""

from .downloader import Downloader, resolve_extension
from .metadata import render_card_metadata, render_track_details

__all__ = [
    "Downloader",
    "render_card_metadata",
    "render_track_details",
    "resolve_extension",
]
