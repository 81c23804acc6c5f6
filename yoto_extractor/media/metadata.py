"""
Renders a card's descriptive metadata and per-track details as plain text.

Both reports use a fixed field order. A field missing from the card is
written as the '__undefined__' placeholder rather than being left out.
"""

from typing import Any, Iterable, List, Optional

from yoto_extractor.models.card import Card, PlannedTrack, plan_tracks
from yoto_extractor.utils.formatting import (
    UNDEFINED,
    convert_bytes,
    convert_seconds,
    format_languages,
    format_value,
)

TRACK_DETAILS_HEADER = "Track Details\n=============\n\n"


def _section(title: str, underline: str) -> List[str]:
    return [title, underline]


def _duration_lines(duration: Optional[Any]) -> List[str]:
    if duration is None:
        return [
            f"Duration (seconds): {UNDEFINED}",
            f"Duration (readable): {UNDEFINED}",
        ]
    return [
        f"Duration (seconds): {format_value(duration)}",
        f"Duration (readable): {convert_seconds(duration)}",
    ]


def _file_size_lines(file_size: Optional[Any]) -> List[str]:
    if file_size is None:
        return [
            f"File Size (bytes): {UNDEFINED}",
            f"File Size (readable): {UNDEFINED}",
        ]
    return [
        f"File Size (bytes): {format_value(file_size)}",
        f"File Size (readable): {convert_bytes(file_size)}",
    ]


def render_card_metadata(card: Card) -> str:
    """Renders the contents of metadata.txt."""
    metadata = card.metadata
    content = card.content
    media = metadata.media

    lines = ["YOTO Card Metadata", "===================", ""]

    lines += _section("Basic Details", "-------------")
    lines += [
        f"Title: {format_value(card.title)}",
        f"Author: {card.author}",
        f"Description: {format_value(metadata.description)}",
        "",
    ]

    lines += _section("Extended Details", "----------------")
    lines += [
        f"Version: {format_value(content.version)}",
        f"Category: {format_value(metadata.category)}",
    ]
    if metadata.languages:
        lines.append(f"Languages: {format_languages(metadata.languages)}")
    lines += [
        f"Playback Type: {format_value(content.playback_type)}",
        f"Card ID: {format_value(card.card_id)}",
        f"Created At: {format_value(card.created_at)}",
        f"Updated At: {format_value(card.updated_at)}",
        f"Slug: {format_value(card.slug)}",
    ]
    lines += _duration_lines(media.duration if media else None)
    lines += _file_size_lines(media.file_size if media else None)
    lines.append("")

    lines += _section("Share Statistics", "----------------")
    lines += [
        f"Share Count: {format_value(card.share_count)}",
        f"Availability: {format_value(content.availability)}",
        f"Share Link URL: {format_value(card.share_link_url)}",
    ]
    return "\n".join(lines) + "\n"


def render_track_entry(planned: PlannedTrack) -> str:
    """Renders one track's block of track-details.txt, trailing blank line included."""
    track = planned.track
    lines = [
        f"Track Number: {planned.number}",
        f"Title: {format_value(track.title)}",
        f"Type: {format_value(track.type)}",
    ]
    lines += _duration_lines(track.duration)
    lines += _file_size_lines(track.file_size)
    lines += [
        f"Channels: {format_value(track.channels)}",
        f"Format: {format_value(track.format)}",
        "",
    ]
    return "\n".join(lines) + "\n"


def join_track_entries(entries: Iterable[str]) -> str:
    """Assembles track-details.txt from entries already in sequence order."""
    return TRACK_DETAILS_HEADER + "".join(entries)


def render_track_details(card: Card) -> str:
    """Renders the full contents of track-details.txt for a card."""
    return join_track_entries(render_track_entry(p) for p in plan_tracks(card))
