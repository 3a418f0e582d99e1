"""Media source models: configured upstream servers and their libraries."""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, StrictBool

from tunarr_mcp.models.common import Number, Omittable, SourceType, UuidStr, WireModel


class LibraryMediaType(str, Enum):
    """Content kind of a library."""

    MOVIES = "movies"
    SHOWS = "shows"
    MUSIC_VIDEOS = "music_videos"
    OTHER_VIDEOS = "other_videos"
    TRACKS = "tracks"


class MediaSourceLibrary(WireModel):
    """A library exposed by a media source."""

    id: UuidStr
    name: str
    media_type: LibraryMediaType
    last_scanned_at: Omittable[Number] = None
    external_key: str
    type: SourceType
    enabled: StrictBool
    is_locked: StrictBool


class PathReplacement(WireModel):
    """Maps a path as seen by the media server to a local path."""

    server_path: str
    local_path: str


class BaseMediaSource(WireModel):
    """Fields shared by every media source."""

    id: str
    name: str
    libraries: list[MediaSourceLibrary]
    path_replacements: list[PathReplacement]


class RemoteMediaSource(BaseMediaSource):
    """A media server reached over the network."""

    uri: str
    access_token: str
    user_id: Optional[str]
    username: Optional[str]


class PlexMediaSource(RemoteMediaSource):
    """Plex server."""

    type: Literal["plex"]
    send_guide_updates: StrictBool
    index: Number
    client_identifier: Omittable[str] = None


class JellyfinMediaSource(RemoteMediaSource):
    """Jellyfin server."""

    type: Literal["jellyfin"]


class EmbyMediaSource(RemoteMediaSource):
    """Emby server."""

    type: Literal["emby"]


class LocalMediaSource(BaseMediaSource):
    """Folders on the Tunarr host."""

    type: Literal["local"]
    media_type: LibraryMediaType
    paths: Annotated[list[Annotated[str, Field(min_length=1)]], Field(min_length=1)]


MediaSource = Annotated[
    Union[PlexMediaSource, JellyfinMediaSource, EmbyMediaSource, LocalMediaSource],
    Field(discriminator="type"),
]
