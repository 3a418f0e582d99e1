"""Program item models returned by search and channel listings.

Items form a discriminated union on ``type``. A few fields only ever appear
on some kinds (``episodeNumber`` on episodes, ``index`` on seasons and
tracks, ``duration`` on playable items, child counts on groupings), and an
item carrying one of them under another tag is invalid. Any other key not
declared by the tagged kind is ignored.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, model_validator
from pydantic_core import PydanticCustomError

from tunarr_mcp.models.common import (
    Identifier,
    NonNegativeNumber,
    Number,
    Omittable,
    PositiveNumber,
    SourceType,
    UuidStr,
    WireModel,
)

_GROUPINGS = frozenset({"show", "season", "artist", "album"})

# Wire and Python name of a field -> the only kinds that may carry it
_KIND_ONLY_FIELDS: dict[str, frozenset[str]] = {
    "episodeNumber": frozenset({"episode"}),
    "episode_number": frozenset({"episode"}),
    "index": frozenset({"season", "track"}),
    "duration": frozenset({"movie", "episode", "track"}),
    "childCount": _GROUPINGS,
    "child_count": _GROUPINGS,
    "grandchildCount": _GROUPINGS,
    "grandchild_count": _GROUPINGS,
}


class ProgramItem(WireModel):
    """Identity and tagging fields shared by every item kind."""

    uuid: UuidStr
    canonical_id: str
    source_type: SourceType
    external_id: str = Field(description="Unique identifier for this item in the external media source")
    identifiers: list[Identifier]
    title: str
    sort_title: str
    tags: list[str]
    media_source_id: str
    library_id: str

    @model_validator(mode="before")
    @classmethod
    def _reject_foreign_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kind = data.get("type")
        foreign = sorted(
            key for key in data if key in _KIND_ONLY_FIELDS and kind not in _KIND_ONLY_FIELDS[key]
        )
        if foreign:
            raise PydanticCustomError(
                "foreign_field",
                "Field(s) {fields} are not valid on a {kind} item",
                {"fields": ", ".join(foreign), "kind": kind},
            )
        return data

    @property
    def display_title(self) -> str:
        """Get display title with year."""
        year = getattr(self, "year", None)
        if year:
            return f"{self.title} ({year})"
        return self.title


class MovieItem(ProgramItem):
    """Movie."""

    type: Literal["movie"]
    original_title: Optional[str]
    year: Optional[PositiveNumber]
    release_date: Optional[Number] = Field(description="Epoch timestamp (ms)")
    release_date_string: Optional[str]
    duration: Number  # ms
    summary: Optional[str] = None
    plot: Optional[str] = None
    tagline: Optional[str] = None
    rating: Optional[str] = None


class ShowItem(ProgramItem):
    """TV show; groups seasons."""

    type: Literal["show"]
    summary: Optional[str] = None
    plot: Optional[str] = None
    tagline: Optional[str] = None
    rating: Optional[str] = None
    release_date: Optional[Number] = None
    release_date_string: Optional[str] = None
    year: Optional[PositiveNumber] = None
    # Seasons
    child_count: Omittable[NonNegativeNumber] = None
    # Episodes
    grandchild_count: Omittable[NonNegativeNumber] = None


class SeasonItem(ProgramItem):
    """Season of a show; groups episodes."""

    type: Literal["season"]
    summary: Optional[str] = None
    plot: Optional[str] = None
    tagline: Optional[str] = None
    index: NonNegativeNumber
    year: Optional[PositiveNumber] = None
    release_date: Optional[Number] = None
    release_date_string: Optional[str] = None
    child_count: Omittable[NonNegativeNumber] = None


class EpisodeItem(ProgramItem):
    """Episode of a season."""

    type: Literal["episode"]
    original_title: Optional[str] = None
    year: Optional[PositiveNumber] = None
    release_date: Optional[Number] = None
    release_date_string: Optional[str] = None
    duration: Number
    episode_number: NonNegativeNumber
    summary: Optional[str] = None


class MusicArtistItem(ProgramItem):
    """Music artist; groups albums."""

    type: Literal["artist"]
    summary: Optional[str] = None
    child_count: Omittable[NonNegativeNumber] = None


class MusicAlbumItem(ProgramItem):
    """Music album; groups tracks."""

    type: Literal["album"]
    summary: Optional[str] = None
    year: Optional[PositiveNumber] = None
    child_count: Omittable[NonNegativeNumber] = None


class MusicTrackItem(ProgramItem):
    """Music track."""

    type: Literal["track"]
    duration: Number
    index: Omittable[NonNegativeNumber] = None


ITEM_CLASSES: tuple[type[ProgramItem], ...] = (
    MovieItem,
    ShowItem,
    SeasonItem,
    EpisodeItem,
    MusicArtistItem,
    MusicAlbumItem,
    MusicTrackItem,
)

ITEM_TYPES = ("movie", "show", "season", "episode", "artist", "album", "track")

ContentItem = Annotated[
    Union[
        MovieItem,
        ShowItem,
        SeasonItem,
        EpisodeItem,
        MusicArtistItem,
        MusicAlbumItem,
        MusicTrackItem,
    ],
    Field(discriminator="type"),
]
