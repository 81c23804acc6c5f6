"""
Owns the on-disk layout of an extraction: the folder skeleton and every path
written beneath it.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from yoto_extractor.exceptions import FilesystemError
from yoto_extractor.utils.path import create_dir, sanitize_filename

log = logging.getLogger(__name__)

ARTWORK_FILENAME = "artwork.png"
METADATA_FILENAME = "metadata.txt"
TRACK_DETAILS_FILENAME = "track-details.txt"


@dataclass(frozen=True)
class OutputLayout:
    """
    The output tree rooted at a destination folder.

    Layout:
        <root>/artwork.png
        <root>/metadata.txt
        <root>/track-details.txt
        <root>/tracks/<NNN> - <title>.<ext>
        <root>/icons/<NNN>.png
    """

    root: Path

    @property
    def tracks_dir(self) -> Path:
        return self.root / "tracks"

    @property
    def icons_dir(self) -> Path:
        return self.root / "icons"

    @property
    def artwork_path(self) -> Path:
        return self.root / ARTWORK_FILENAME

    @property
    def metadata_path(self) -> Path:
        return self.root / METADATA_FILENAME

    @property
    def track_details_path(self) -> Path:
        return self.root / TRACK_DETAILS_FILENAME

    def prepare(self) -> None:
        """
        Creates the root, tracks, and icons directories if they are missing.

        Raises:
            FilesystemError: If a directory cannot be created, e.g. because a
            regular file already occupies the path.
        """
        log.debug(f"Setting up directories under [dim]{self.root}[/dim]")
        for directory in (self.root, self.tracks_dir, self.icons_dir):
            try:
                create_dir(directory)
            except OSError as e:
                raise FilesystemError(
                    f"Could not create directory '{directory}': {e}"
                ) from e

    def track_path(self, number: str, title: str | None, ext: str) -> Path:
        """Final path of a track's audio file, e.g. 'tracks/03 - Title.mp3'."""
        return self.tracks_dir / f"{number} - {sanitize_filename(title)}.{ext}"

    def temp_track_path(self, number: str) -> Path:
        """Scratch path a track's audio is streamed to before its type is known."""
        return self.tracks_dir / f".{number}.part"

    def icon_path(self, number: str) -> Path:
        return self.icons_dir / f"{number}.png"

    def write_text(self, path: Path, text: str) -> None:
        """Writes a UTF-8 report with '\\n' newlines, replacing any previous file."""
        try:
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
        except OSError as e:
            raise FilesystemError(f"Could not write '{path}': {e}") from e

    @staticmethod
    def promote(temp_path: Path, final_path: Path) -> None:
        """Atomically moves a finished download to its final name, overwriting."""
        try:
            os.replace(temp_path, final_path)
        except OSError as e:
            raise FilesystemError(
                f"Could not move '{temp_path.name}' to '{final_path.name}': {e}"
            ) from e
