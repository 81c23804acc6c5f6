"""
Handles the processing of each track of a card, from audio and icon download
to its entry in the track details report.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from yoto_extractor.cli.progress_manager import ProgressManager
from yoto_extractor.exceptions import (
    FetchError,
    FilesystemError,
    UnknownContentTypeError,
)
from yoto_extractor.media.downloader import Downloader, resolve_extension
from yoto_extractor.media.metadata import join_track_entries, render_track_entry
from yoto_extractor.models.card import Card, PlannedTrack, plan_tracks
from yoto_extractor.models.stats import ExtractStats
from yoto_extractor.storage.layout import OutputLayout
from yoto_extractor.utils.formatting import UNDEFINED

log = logging.getLogger(__name__)

ASSET_ERRORS = (FetchError, UnknownContentTypeError, FilesystemError)


class TrackState(Enum):
    PENDING = "pending"
    AUDIO_DOWNLOADED = "audio downloaded"
    AUDIO_FAILED = "audio failed"
    AUDIO_SKIPPED = "audio skipped"
    ICON_DOWNLOADED = "icon downloaded"
    ICON_FAILED = "icon failed"
    ICON_SKIPPED = "icon skipped"
    REPORTED = "reported"


@dataclass
class TrackOutcome:
    """What happened to one track, and the report entry it contributed."""

    planned: PlannedTrack
    history: List[TrackState] = field(default_factory=lambda: [TrackState.PENDING])
    audio_path: Optional[Path] = None
    icon_path: Optional[Path] = None
    report_entry: str = ""

    @property
    def state(self) -> TrackState:
        return self.history[-1]

    def advance(self, state: TrackState) -> None:
        self.history.append(state)


def _display_name(planned: PlannedTrack) -> str:
    return f"{planned.number} - {escape(planned.track.title or UNDEFINED)}"


class TrackProcessor:
    """
    Downloads one track's audio and icon and renders its report entry.

    Audio is streamed into a scratch file first, since its extension is only
    known once the response declares a content type. A failure of either
    asset is logged and counted; the track is still reported.
    """

    def __init__(
        self,
        layout: OutputLayout,
        downloader: Downloader,
        stats: ExtractStats,
        progress_manager: Optional[ProgressManager] = None,
    ):
        self.layout = layout
        self.downloader = downloader
        self.stats = stats
        self.progress_manager = progress_manager or ProgressManager(
            Console(quiet=True), enabled=False
        )

    async def process(self, planned: PlannedTrack) -> TrackOutcome:
        outcome = TrackOutcome(planned)
        outcome.advance(await self._download_audio(planned, outcome))
        outcome.advance(await self._download_icon(planned, outcome))
        outcome.report_entry = render_track_entry(planned)
        outcome.advance(TrackState.REPORTED)
        return outcome

    async def _download_audio(
        self, planned: PlannedTrack, outcome: TrackOutcome
    ) -> TrackState:
        track = planned.track
        display_name = _display_name(planned)

        if not track.track_url:
            self.stats.tracks_without_audio += 1
            log.warning(f"  [yellow]○ No audio:[/] {display_name} (no track URL)")
            return TrackState.AUDIO_SKIPPED

        temp_path = self.layout.temp_track_path(planned.number)
        task_id = self.progress_manager.add_track_task(display_name)

        def on_progress(completed: int, total: Optional[int]) -> None:
            self.progress_manager.update_task_progress(task_id, completed, total)

        try:
            content_type, size = await self.downloader.download_to(
                track.track_url, temp_path, on_progress=on_progress
            )
            ext = resolve_extension(content_type)
            final_path = self.layout.track_path(planned.number, track.title, ext)
            self.layout.promote(temp_path, final_path)
        except ASSET_ERRORS as e:
            self.stats.tracks_failed += 1
            self.progress_manager.remove_task(task_id, success=False)
            log.error(
                f"  [red]✗ Failed:[/] {display_name} ({escape(str(e))})",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return TrackState.AUDIO_FAILED
        finally:
            if temp_path.exists():
                try:
                    os.remove(temp_path)
                except OSError as e:
                    log.debug(f"Could not remove scratch file {temp_path}: {e}")

        self.stats.tracks_downloaded += 1
        self.stats.record_bytes(size)
        self.progress_manager.remove_task(task_id, success=True)
        outcome.audio_path = final_path
        log.info(f"  [green]✓ Saved:[/] [dim]{escape(final_path.name)}[/dim]")
        return TrackState.AUDIO_DOWNLOADED

    async def _download_icon(
        self, planned: PlannedTrack, outcome: TrackOutcome
    ) -> TrackState:
        icon_url = planned.icon_url
        if not icon_url:
            log.debug(f"No icon for track {planned.number}.")
            return TrackState.ICON_SKIPPED

        icon_path = self.layout.icon_path(planned.number)
        try:
            _, size = await self.downloader.download_to(icon_url, icon_path)
        except ASSET_ERRORS as e:
            self.stats.icons_failed += 1
            try:
                icon_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                log.debug(f"Could not remove partial icon {icon_path}: {cleanup_error}")
            log.error(
                f"  [red]✗ Icon failed:[/] {_display_name(planned)} ({escape(str(e))})",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return TrackState.ICON_FAILED

        self.stats.icons_downloaded += 1
        self.stats.record_bytes(size)
        outcome.icon_path = icon_path
        return TrackState.ICON_DOWNLOADED


class TrackPipeline:
    """
    Runs every track of a card through a TrackProcessor under a bounded
    worker pool, then writes track-details.txt in sequence order.
    """

    def __init__(
        self,
        layout: OutputLayout,
        downloader: Downloader,
        stats: ExtractStats,
        max_workers: int = 4,
        progress_manager: Optional[ProgressManager] = None,
    ):
        self.layout = layout
        self.stats = stats
        self.processor = TrackProcessor(layout, downloader, stats, progress_manager)
        self.progress_manager = self.processor.progress_manager
        self.semaphore = asyncio.Semaphore(max_workers)

    async def _process_with_limit(self, planned: PlannedTrack) -> TrackOutcome:
        async with self.semaphore:
            outcome = await self.processor.process(planned)
        self.progress_manager.advance_overall()
        return outcome

    async def run(self, card: Card) -> List[TrackOutcome]:
        """
        Processes all tracks and writes the track details report.

        Sequence numbers are fixed before any download starts, and outcomes
        come back in that order however the downloads interleave.

        Raises:
            FilesystemError: If the report cannot be written.
        """
        planned_tracks = plan_tracks(card)
        self.stats.tracks_total = len(planned_tracks)
        log.info(f"Processing [bold]{len(planned_tracks)}[/bold] tracks...")
        self.progress_manager.initialize_session(len(planned_tracks))

        outcomes = await asyncio.gather(
            *(self._process_with_limit(planned) for planned in planned_tracks)
        )

        self.layout.write_text(
            self.layout.track_details_path,
            join_track_entries(outcome.report_entry for outcome in outcomes),
        )
        log.info(
            f"Wrote [dim]{self.layout.track_details_path.name}[/dim] "
            f"({len(outcomes)} entries)."
        )
        return list(outcomes)
