"""Typed shapes exchanged with Tunarr."""

from tunarr_mcp.models.channel import Channel, ChannelIcon, IconPosition, Watermark
from tunarr_mcp.models.common import Identifier, Sort, SourceType
from tunarr_mcp.models.content import (
    ContentItem,
    EpisodeItem,
    MovieItem,
    MusicAlbumItem,
    MusicArtistItem,
    MusicTrackItem,
    SeasonItem,
    ShowItem,
)
from tunarr_mcp.models.filters import (
    FieldSpec,
    FilterNode,
    FilterOp,
    FilterValue,
    dump_filter,
    parse_field_spec,
    parse_filter,
)
from tunarr_mcp.models.media_source import MediaSource
from tunarr_mcp.models.pages import ChannelList, ChannelMovies, ChannelShows, MediaSourceList
from tunarr_mcp.models.search import SearchProgramsRequest, SearchProgramsResult, SearchQuery

__all__ = [
    "Channel",
    "ChannelIcon",
    "ChannelList",
    "ChannelMovies",
    "ChannelShows",
    "ContentItem",
    "EpisodeItem",
    "FieldSpec",
    "FilterNode",
    "FilterOp",
    "FilterValue",
    "IconPosition",
    "Identifier",
    "MediaSource",
    "MediaSourceList",
    "MovieItem",
    "MusicAlbumItem",
    "MusicArtistItem",
    "MusicTrackItem",
    "SearchProgramsRequest",
    "SearchProgramsResult",
    "SearchQuery",
    "SeasonItem",
    "ShowItem",
    "Sort",
    "SourceType",
    "Watermark",
    "dump_filter",
    "parse_field_spec",
    "parse_filter",
]
