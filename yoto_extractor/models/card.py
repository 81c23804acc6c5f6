"""
Pydantic models for a Yoto card and its chapters and tracks.

Field aliases follow the camelCase keys of the card JSON. Every model is frozen
and ignores keys it does not know about, so a card can be validated straight
from any of the payload shapes the site serves. Numbers arriving where text is
expected are taken as text, and fields that only feed the reports accept any
JSON scalar.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_AUTHOR = "MYO"


class _CardModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


def _none_as_empty(value: Any) -> Any:
    """Treats an explicit JSON null as an empty collection or object."""
    return value if value is not None else ()


class Display(_CardModel):
    """Display configuration carrying a 16x16 icon URL."""

    icon16x16: Optional[str] = None


class Track(_CardModel):
    """A single playable audio unit."""

    title: Optional[str] = None
    type: Optional[Any] = None
    track_url: Optional[str] = Field(None, alias="trackUrl")
    display: Optional[Display] = None
    duration: Optional[int | float] = None
    file_size: Optional[int | float] = Field(None, alias="fileSize")
    channels: Optional[Any] = None
    format: Optional[Any] = None

    @property
    def icon_url(self) -> Optional[str]:
        return self.display.icon16x16 if self.display else None


class Chapter(_CardModel):
    """An ordered group of tracks with an optional fallback icon."""

    title: Optional[str] = None
    tracks: tuple[Track, ...] = ()
    display: Optional[Display] = None

    empty_tracks = field_validator("tracks", mode="before")(_none_as_empty)

    @property
    def icon_url(self) -> Optional[str]:
        return self.display.icon16x16 if self.display else None


class CardCover(_CardModel):
    image_l: Optional[str] = Field(None, alias="imageL")


class CardMedia(_CardModel):
    duration: Optional[int | float] = None
    file_size: Optional[int | float] = Field(None, alias="fileSize")


class CardMetadata(_CardModel):
    author: Optional[str] = None
    description: Optional[Any] = None
    category: Optional[Any] = None
    languages: Optional[tuple[str, ...]] = None
    cover: Optional[CardCover] = None
    media: Optional[CardMedia] = None


class CardContent(_CardModel):
    version: Optional[Any] = None
    playback_type: Optional[Any] = Field(None, alias="playbackType")
    availability: Optional[Any] = None
    chapters: tuple[Chapter, ...] = ()

    empty_chapters = field_validator("chapters", mode="before")(_none_as_empty)


class Card(_CardModel):
    """
    The top-level content record: title, descriptive metadata, and chapters.

    Timestamps are opaque and passed through exactly as received.
    """

    title: Optional[str] = None
    card_id: Optional[Any] = Field(None, alias="cardId")
    slug: Optional[Any] = None
    created_at: Optional[Any] = Field(None, alias="createdAt")
    updated_at: Optional[Any] = Field(None, alias="updatedAt")
    share_count: Optional[Any] = Field(None, alias="shareCount")
    share_link_url: Optional[Any] = Field(None, alias="shareLinkUrl")
    metadata: CardMetadata = Field(default_factory=CardMetadata)
    content: CardContent = Field(default_factory=CardContent)

    @field_validator("metadata", "content", mode="before")
    @classmethod
    def null_section(cls, value: Any) -> Any:
        return value if value is not None else {}

    @property
    def author(self) -> str:
        return self.metadata.author or DEFAULT_AUTHOR

    @property
    def cover_image_url(self) -> Optional[str]:
        return self.metadata.cover.image_l if self.metadata.cover else None

    @property
    def chapters(self) -> tuple[Chapter, ...]:
        return self.content.chapters

    @property
    def track_count(self) -> int:
        return sum(len(chapter.tracks) for chapter in self.content.chapters)


@dataclass(frozen=True)
class PlannedTrack:
    """A track with its globally assigned 1-based sequence number."""

    sequence: int
    number: str
    track: Track
    chapter: Chapter

    @property
    def icon_url(self) -> Optional[str]:
        """The track's own icon, falling back to its chapter's icon."""
        return self.track.icon_url or self.chapter.icon_url


def plan_tracks(card: Card) -> list[PlannedTrack]:
    """
    Flattens chapters into tracks in document order and numbers them 1..N.

    Every number is zero-padded to the width of N, so N is counted first.
    """
    width = len(str(card.track_count))
    planned = []
    sequence = 0
    for chapter in card.chapters:
        for track in chapter.tracks:
            sequence += 1
            planned.append(
                PlannedTrack(
                    sequence=sequence,
                    number=str(sequence).zfill(width),
                    track=track,
                    chapter=chapter,
                )
            )
    return planned
