"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as the card, configuration and
statistics.
"""

from .card import Card, Chapter, PlannedTrack, Track
from .config import ExtractConfig
from .stats import ExtractStats

__all__ = [
    "Card",
    "Chapter",
    "ExtractConfig",
    "ExtractStats",
    "PlannedTrack",
    "Track",
]
