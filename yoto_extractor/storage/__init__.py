"""
Storage Layer.

This package handles everything written to or read from disk: the output
folder layout and the configuration file.
"""

from .config_manager import ConfigManager
from .layout import OutputLayout

__all__ = ["ConfigManager", "OutputLayout"]
