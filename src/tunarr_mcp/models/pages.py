"""Listing envelopes: pages returned by Tunarr and the tool results built from them."""

from tunarr_mcp.models.channel import Channel
from tunarr_mcp.models.common import Number, WireModel
from tunarr_mcp.models.content import MovieItem, ShowItem
from tunarr_mcp.models.media_source import MediaSource


class MoviePage(WireModel):
    """``/api/channels/{id}/programs?type=movie`` response."""

    total: Number
    result: list[MovieItem]
    size: Number


class ShowPage(WireModel):
    """``/api/channels/{id}/shows`` response."""

    total: Number
    result: list[ShowItem]
    size: Number


class ChannelList(WireModel):
    """All channels."""

    channels: list[Channel]


class ChannelMovies(WireModel):
    """Movies scheduled on a channel."""

    total: Number
    movies: list[MovieItem]
    size: Number

    @classmethod
    def from_page(cls, page: MoviePage) -> "ChannelMovies":
        return cls(total=page.total, movies=page.result, size=page.size)


class ChannelShows(WireModel):
    """Shows scheduled on a channel."""

    total: Number
    shows: list[ShowItem]
    size: Number

    @classmethod
    def from_page(cls, page: ShowPage) -> "ChannelShows":
        return cls(total=page.total, shows=page.result, size=page.size)


class MediaSourceList(WireModel):
    """All configured media sources."""

    media_sources: list[MediaSource]
