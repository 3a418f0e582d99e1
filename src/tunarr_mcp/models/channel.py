"""Channel models.

A channel is validated as one document with three field policies:

* required fields fail the whole channel when absent or malformed,
* optional fields may be absent,
* cosmetic fields (icon attributes, watermark opacity, fade leading edge)
  use ``fallback``: a malformed value is replaced by its default so a
  partially corrupt channel is still usable.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field, StrictBool, StrictInt, StrictStr

from tunarr_mcp.core.validation import fallback
from tunarr_mcp.models.common import (
    NonNegativeNumber,
    Omittable,
    Number,
    Percentage,
    PositiveNumber,
    SourceType,
    WireModel,
    number_type,
)


class IconPosition(str, Enum):
    """Screen corner for channel icons and watermarks."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class OfflineMode(str, Enum):
    """What a channel shows while offline."""

    PICTURE = "pic"
    CLIP = "clip"


class ProgramType(str, Enum):
    """Kind of a lineup program."""

    MOVIE = "movie"
    EPISODE = "episode"
    TRACK = "track"
    REDIRECT = "redirect"
    CUSTOM = "custom"
    FLEX = "flex"


class ContentProgramType(str, Enum):
    """Kind of playable content a watermark fade rule targets."""

    MOVIE = "movie"
    EPISODE = "episode"
    TRACK = "track"
    MUSIC_VIDEO = "music_video"
    OTHER_VIDEO = "other_video"


class SubtitleFilter(str, Enum):
    """Which subtitle streams a preference may pick."""

    NONE = "none"
    FORCED = "forced"
    DEFAULT = "default"
    ANY = "any"


class ChannelStreamMode(str, Enum):
    """Delivery mode of a channel stream."""

    HLS = "hls"
    HLS_SLOWER = "hls_slower"
    MPEGTS = "mpegts"
    HLS_DIRECT = "hls_direct"


class SessionStreamMode(str, Enum):
    """Delivery mode of a live session, including concat variants."""

    HLS = "hls"
    HLS_SLOWER = "hls_slower"
    MPEGTS = "mpegts"
    HLS_DIRECT = "hls_direct"
    HLS_CONCAT = "hls_concat"
    HLS_SLOWER_CONCAT = "hls_slower_concat"
    MPEGTS_CONCAT = "mpegts_concat"
    HLS_DIRECT_CONCAT = "hls_direct_concat"


class Program(WireModel):
    """Lineup program, used for channel fallback content."""

    id: str
    duration: Number
    source_type: SourceType
    type: ProgramType
    title: Omittable[str] = None
    summary: Omittable[str] = None
    show_title: Omittable[str] = None
    season: Omittable[Number] = None
    episode: Omittable[Number] = None
    year: Omittable[Number] = None
    rating: Omittable[str] = None
    date: Omittable[str] = None
    icon: Omittable[str] = None
    episode_icon: Omittable[str] = None
    season_icon: Omittable[str] = None
    show_icon: Omittable[str] = None
    file: Omittable[str] = None
    plex_file: Omittable[str] = None
    # e.g. the rating key for Plex items
    external_key: Omittable[str] = None
    server_key: Omittable[str] = None
    # Deprecated upstream
    key: Omittable[str] = None
    custom_show_id: Omittable[str] = None
    custom_show_name: Omittable[str] = None
    custom_order: Omittable[Number] = None
    # Redirect target
    channel: Omittable[str] = None
    album_name: Omittable[str] = None
    artist_name: Omittable[str] = None


class ChannelIcon(WireModel):
    """Channel logo overlay. Every attribute falls back to its default."""

    path: Annotated[StrictStr, fallback("")] = ""
    width: Annotated[NonNegativeNumber, fallback(0)] = 0
    duration: Annotated[NonNegativeNumber, fallback(0)] = 0
    position: Annotated[IconPosition, fallback(IconPosition.BOTTOM_RIGHT)] = IconPosition.BOTTOM_RIGHT


class ChannelOffline(WireModel):
    """Offline screen configuration."""

    mode: OfflineMode
    picture: Omittable[str] = None
    soundtrack: Omittable[str] = None


class Resolution(WireModel):
    """Frame size in pixels."""

    width_px: Number
    height_px: Number


class ChannelTranscodingOptions(WireModel):
    """Per-channel transcoding overrides."""

    target_resolution: Omittable[Resolution] = None
    video_bitrate: Omittable[Number] = None
    video_buffer_size: Omittable[Number] = None


PeriodMinutes = number_type(ge=1)


class WatermarkFadeConfig(WireModel):
    """Periodic fade in/out rule for a watermark.

    A 5 minute period fades the watermark in every 5th minute and shows it
    for 5 minutes.
    """

    program_type: Omittable[ContentProgramType] = None
    period_mins: PeriodMinutes
    # True: visible as soon as the stream starts; False: first fade in after period_mins
    leading_edge: Annotated[StrictBool, fallback(True)] = True


class Watermark(WireModel):
    """Watermark overlay."""

    url: Omittable[str] = None
    enabled: StrictBool
    position: IconPosition = IconPosition.BOTTOM_RIGHT
    width: PositiveNumber
    vertical_margin: Percentage
    horizontal_margin: Percentage
    duration: NonNegativeNumber = 0
    fixed_size: Omittable[StrictBool] = None
    animated: Omittable[StrictBool] = None
    opacity: Annotated[StrictInt, Field(ge=0, le=100), fallback(100)] = 100
    fade_config: Omittable[list[WatermarkFadeConfig]] = None


class SubtitlePreference(WireModel):
    """Subtitle selection preference."""

    # Tunarr's wire name
    language_code: str = Field(alias="langugeCode")
    priority: NonNegativeNumber
    allow_image_based: StrictBool
    allow_external: StrictBool
    filter: SubtitleFilter = SubtitleFilter.ANY


class StreamConnection(WireModel):
    """A client connected to a channel session."""

    ip: str
    user_agent: Omittable[str] = None
    last_heartbeat: Omittable[NonNegativeNumber] = None


class ChannelSession(WireModel):
    """A live stream session of a channel."""

    type: SessionStreamMode
    state: str
    num_connections: NonNegativeNumber
    connections: list[StreamConnection]


class FillerCollection(WireModel):
    """Filler list attached to a channel."""

    id: str
    weight: Number
    cooldown_seconds: Number


class OnDemandConfig(WireModel):
    """On-demand playback switch."""

    enabled: StrictBool


class Channel(WireModel):
    """A programmed linear channel."""

    id: str
    name: str
    number: Number
    group_title: str

    # Scheduling
    duration: Number
    start_time: Number
    program_count: Number
    guide_minimum_duration: Number
    guide_flex_title: Omittable[str] = None

    # Display
    icon: ChannelIcon
    offline: ChannelOffline
    watermark: Omittable[Watermark] = None
    stealth: StrictBool

    # Streaming
    stream_mode: ChannelStreamMode
    transcode_config_id: str
    transcoding: Omittable[ChannelTranscodingOptions] = None
    on_demand: OnDemandConfig
    sessions: Omittable[list[ChannelSession]] = None

    # Subtitles
    subtitles_enabled: StrictBool
    subtitle_preferences: Omittable[Annotated[list[SubtitlePreference], Field(min_length=1)]] = None

    # Filler
    fallback: Omittable[list[Program]] = None
    filler_collections: Omittable[list[FillerCollection]] = None
    filler_repeat_cooldown: Omittable[Number] = None
    disable_filler_overlay: StrictBool
