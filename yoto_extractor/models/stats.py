"""
Dataclass for tracking extraction session statistics.
"""

import time
from dataclasses import dataclass, field


@dataclass
class ExtractStats:
    """Tracks what one extraction run produced and what it had to skip."""

    tracks_total: int = 0
    tracks_downloaded: int = 0
    tracks_failed: int = 0
    tracks_without_audio: int = 0
    icons_downloaded: int = 0
    icons_failed: int = 0
    artwork_downloaded: bool = False
    total_size_downloaded: int = 0
    start_time: float = field(default_factory=time.monotonic, repr=False)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def record_bytes(self, size: int) -> None:
        self.total_size_downloaded += size
