"""
The main orchestrator: turns one card URL into a populated output folder.
"""

import logging
from typing import Optional

from rich.markup import escape

from yoto_extractor.cli.progress_manager import ProgressManager
from yoto_extractor.exceptions import FetchError, FilesystemError
from yoto_extractor.media.downloader import Downloader
from yoto_extractor.media.metadata import render_card_metadata
from yoto_extractor.models.card import Card
from yoto_extractor.models.config import ExtractConfig
from yoto_extractor.models.stats import ExtractStats
from yoto_extractor.storage.layout import OutputLayout
from yoto_extractor.utils.formatting import UNDEFINED
from yoto_extractor.web.payload_locator import PayloadLocator

from .normalizer import normalize
from .track_processor import TrackOutcome, TrackPipeline

log = logging.getLogger(__name__)


class CardExtractor:
    """
    Orchestrates a single extraction run.

    The steps run in order: locate the payload, normalize it into a Card,
    prepare the folder tree, save the artwork, write metadata.txt, then hand
    the tracks to the TrackPipeline. Anything failing before the reports are
    written is fatal; per-asset failures afterwards are only counted.
    """

    def __init__(
        self,
        config: ExtractConfig,
        progress_manager: Optional[ProgressManager] = None,
        downloader: Optional[Downloader] = None,
    ):
        self.config = config
        self.stats = ExtractStats()
        self.layout = OutputLayout(config.output_dir)
        self._owns_downloader = downloader is None
        self.downloader = downloader or Downloader.from_config(config)
        self.locator = PayloadLocator(self.downloader)
        self.pipeline = TrackPipeline(
            self.layout,
            self.downloader,
            self.stats,
            max_workers=config.max_workers,
            progress_manager=progress_manager,
        )
        self.card: Optional[Card] = None
        self.outcomes: list[TrackOutcome] = []

    async def extract(self) -> ExtractStats:
        """
        Runs the whole extraction.

        Raises:
            FetchError: If the card page cannot be fetched.
            ParseError: If the page carries no JSON payload.
            SchemaError: If the payload holds no recognizable card.
            FilesystemError: If the folder tree or a report cannot be written.
        """
        try:
            log.info(f"Fetching card from [cyan]{escape(self.config.url)}[/cyan]")
            doc = await self.locator.locate(self.config.url)
            card = normalize(doc)
            self.card = card
            log.info(
                f"Found card [bold]{escape(card.title or UNDEFINED)}[/bold] "
                f"by {escape(card.author)} ({card.track_count} tracks)"
            )

            self.layout.prepare()
            await self._download_artwork(card)

            self.layout.write_text(
                self.layout.metadata_path, render_card_metadata(card)
            )
            log.info(f"Wrote [dim]{self.layout.metadata_path.name}[/dim]")

            self.outcomes = await self.pipeline.run(card)
            return self.stats
        finally:
            if self._owns_downloader:
                await self.downloader.close()

    async def _download_artwork(self, card: Card) -> None:
        cover_url = card.cover_image_url
        if not cover_url:
            log.info("[dim]No cover art found in card data.[/dim]")
            self._discard_artwork()
            return

        try:
            _, size = await self.downloader.download_to(
                cover_url, self.layout.artwork_path
            )
        except (FetchError, FilesystemError) as e:
            self._discard_artwork()
            log.warning(
                f"[yellow]⚠ Could not download artwork:[/] {escape(str(e))}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return

        self.stats.artwork_downloaded = True
        self.stats.record_bytes(size)
        log.info(f"Saved [dim]{self.layout.artwork_path.name}[/dim]")

    def _discard_artwork(self) -> None:
        """Removes artwork left by an earlier run or a partial download."""
        artwork_path = self.layout.artwork_path
        try:
            artwork_path.unlink(missing_ok=True)
        except OSError as e:
            log.debug(f"Could not remove stale artwork {artwork_path}: {e}")
