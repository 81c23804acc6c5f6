"""
Utilities for handling file names, directories, and URLs.
"""

import re
from pathlib import Path

from pathvalidate import sanitize_filepath

FALLBACK_FILENAME = "untitled"

_TAB_REGEX = re.compile(r"\t")
_ILLEGAL_CHARS_REGEX = re.compile(r'[<>:"/\\|?*]')


def ensure_https(url: str) -> str:
    """Prefixes 'https://' to a URL that carries neither an http nor https scheme."""
    if not url.startswith(("http://", "https://")):
        return "https://" + url
    return url


def sanitize_filename(name: str | None) -> str:
    """
    Strips tabs and the characters <>:"/\\|?* from a name, then trims whitespace.

    Falls back to 'untitled' when nothing usable is left.
    """
    if not name:
        return FALLBACK_FILENAME
    clean = _TAB_REGEX.sub("", str(name))
    clean = _ILLEGAL_CHARS_REGEX.sub("", clean).strip()
    return clean or FALLBACK_FILENAME


def sanitize_output_dir(folder: str | Path) -> Path:
    """Makes a user-supplied destination folder safe for the current platform."""
    return Path(sanitize_filepath(str(folder), platform="auto"))


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
