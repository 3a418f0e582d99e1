"""Named shapes, so callers can validate a payload by identifier."""

from typing import Any

from pydantic import TypeAdapter

from tunarr_mcp.core.validation import validate, validate_text
from tunarr_mcp.models.channel import Channel
from tunarr_mcp.models.content import ContentItem
from tunarr_mcp.models.filters import FilterTree
from tunarr_mcp.models.media_source import MediaSource
from tunarr_mcp.models.pages import (
    ChannelList,
    ChannelMovies,
    ChannelShows,
    MediaSourceList,
    MoviePage,
    ShowPage,
)
from tunarr_mcp.models.search import SearchProgramsRequest, SearchProgramsResult, SearchQuery

SHAPES: dict[str, Any] = {
    "channel": Channel,
    "channels": list[Channel],
    "channel_list": ChannelList,
    "content_item": ContentItem,
    "content_items": list[ContentItem],
    "movie_page": MoviePage,
    "show_page": ShowPage,
    "channel_movies": ChannelMovies,
    "channel_shows": ChannelShows,
    "media_source": MediaSource,
    "media_sources": list[MediaSource],
    "media_source_list": MediaSourceList,
    "filter": FilterTree,
    "search_query": SearchQuery,
    "search_request": SearchProgramsRequest,
    "search_results": SearchProgramsResult,
}

# Compiled once at import; adapters are immutable
_ADAPTERS: dict[str, TypeAdapter] = {name: TypeAdapter(shape) for name, shape in SHAPES.items()}


def shape_names() -> list[str]:
    """Identifiers accepted by ``validate_named``."""
    return sorted(SHAPES)


def get_adapter(name: str) -> TypeAdapter:
    """
    Resolve a shape identifier.

    Raises:
        KeyError: Unknown identifier
    """
    try:
        return _ADAPTERS[name]
    except KeyError:
        raise KeyError(f"Unknown shape '{name}' (known: {', '.join(shape_names())})") from None


def validate_named(name: str, data: Any) -> Any:
    """Validate JSON-decoded ``data`` against the shape called ``name``."""
    return validate(get_adapter(name), data, name=name)


def validate_named_text(name: str, text: str | bytes) -> Any:
    """Validate a raw JSON document against the shape called ``name``."""
    return validate_text(get_adapter(name), text, name=name)


def dump_named(name: str, value: Any) -> Any:
    """Serialize ``value`` with the shape called ``name``."""
    return get_adapter(name).dump_python(value, mode="json", by_alias=True)
