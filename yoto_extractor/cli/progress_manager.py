"""
Manages a Rich progress display for concurrent track downloads: one overall
bar for the card plus a transient bar per track in flight.
"""

import asyncio
from typing import Optional

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    BarColumn,
    DownloadColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class ProgressManager:
    """
    Progress reporting for one extraction run.

    With `enabled=False` nothing is drawn but counts are still kept, so
    callers never need to check whether a display is attached.
    """

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )

        self.overall_progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            console=console,
        )

        self._live: Optional[Live] = None

        self._overall_task_id: Optional[TaskID] = None
        self._active_tasks: set[TaskID] = set()
        self._stats = {
            "total_tracks": 0,
            "completed": 0,
            "failed": 0,
            "active_downloads": 0,
            "peak_concurrent": 0,
        }

    def initialize_session(self, total_tracks: int) -> None:
        self._stats["total_tracks"] = total_tracks
        if not self.enabled:
            return
        self._overall_task_id = self.overall_progress.add_task(
            "Tracks", total=total_tracks
        )

    def add_track_task(self, description: str) -> Optional[TaskID]:
        if not self.enabled:
            return None
        if len(description) > 45:
            description = description[:42] + "..."
        task_id = self.progress.add_task(description, total=None, start=True)
        self._active_tasks.add(task_id)
        self._stats["active_downloads"] = len(self._active_tasks)
        self._stats["peak_concurrent"] = max(
            self._stats["peak_concurrent"], self._stats["active_downloads"]
        )
        return task_id

    def update_task_progress(
        self, task_id: Optional[TaskID], completed: int, total: Optional[int] = None
    ) -> None:
        if task_id is None or not self.enabled:
            return
        if total:
            self.progress.update(task_id, completed=completed, total=total)
        else:
            self.progress.update(task_id, completed=completed)

    def remove_task(self, task_id: Optional[TaskID], success: bool = True) -> None:
        if success:
            self._stats["completed"] += 1
        else:
            self._stats["failed"] += 1
        if task_id is None or not self.enabled:
            return
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            pass
        self._active_tasks.discard(task_id)
        self._stats["active_downloads"] = len(self._active_tasks)

    def advance_overall(self) -> None:
        """Marks one track as fully handled, whatever its outcome."""
        if self._overall_task_id is not None and self.enabled:
            self.overall_progress.advance(self._overall_task_id)

    def get_statistics(self) -> dict:
        return self._stats.copy()

    async def __aenter__(self) -> "ProgressManager":
        if self.enabled:
            self._live = Live(
                Group(self.overall_progress, self.progress),
                console=self.console,
                refresh_per_second=12,
                transient=True,
            )
            self._live.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._live:
            await asyncio.sleep(0.1)
            self._live.stop()
            self._live = None
