"""
Tool server exposing Tunarr to agents via FastMCP.

Each tool validates its arguments, calls the Tunarr client and returns the
validated result as JSON-ready data. Transport and validation failures are
logged and re-raised; FastMCP turns them into tool errors.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any, Optional

from loguru import logger
from mcp.types import ToolAnnotations
from fastmcp import FastMCP
from pydantic import Field

from tunarr_mcp.clients.tunarr import TunarrClient
from tunarr_mcp.core.config import Settings
from tunarr_mcp.core.exceptions import TunarrError
from tunarr_mcp.models.registry import dump_named
from tunarr_mcp.models.search import SearchProgramsRequest, SearchQuery

# --- Global client, set by configure() ---
_settings: Optional[Settings] = None
_client: Optional[TunarrClient] = None
_open_sessions = 0


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Close the Tunarr client on the serving loop once the last session ends."""
    global _open_sessions
    _open_sessions += 1
    try:
        yield
    finally:
        _open_sessions -= 1
        if _open_sessions == 0 and _client is not None and not _client.is_closed:
            await _client.close()
            logger.debug("Tunarr client closed")


mcp: FastMCP = FastMCP("tunarr", lifespan=lifespan)


def configure(settings: Settings) -> TunarrClient:
    """Create the Tunarr client the tools use."""
    global _settings, _client
    _settings = settings
    _client = TunarrClient(url=settings.tunarr.host, timeout=settings.tunarr.timeout)
    logger.info(f"Tool server bound to Tunarr at {settings.tunarr.host}")
    return _client


def get_client() -> TunarrClient:
    """Client for the current session; reopened if a previous session closed it."""
    global _client
    if _client is None:
        raise RuntimeError("Tunarr client is not configured; call configure() first")
    if _client.is_closed and _settings is not None:
        _client = TunarrClient(url=_settings.tunarr.host, timeout=_settings.tunarr.timeout)
    return _client


@mcp.tool(
    name="list_channels",
    description="Get channels",
    annotations=ToolAnnotations(title="List Channels", readOnlyHint=True),
)
async def list_channels() -> dict[str, Any]:
    """List every channel with its configuration and live sessions."""
    logger.debug(f"list_channels called (host={get_client().base_url})")
    try:
        result = await get_client().list_channels()
    except TunarrError as e:
        logger.error(f"list_channels failed: {e}")
        raise
    return dump_named("channel_list", result)


@mcp.tool(
    name="list_movies_in_channel",
    description="Get movies in channel",
    annotations=ToolAnnotations(title="List Movies In Channel", readOnlyHint=True),
)
async def list_movies_in_channel(
    id: Annotated[str, Field(description="Channel Id")],
    limit: Annotated[int, Field(description="How many movies to return")] = 50,
    offset: Annotated[int, Field(description="Offset to start returning items")] = 0,
) -> dict[str, Any]:
    """List movies scheduled on a channel."""
    logger.debug(f"list_movies_in_channel called (id={id}, limit={limit}, offset={offset})")
    try:
        result = await get_client().list_movies_in_channel(id, offset=offset, limit=limit)
    except TunarrError as e:
        logger.error(f"list_movies_in_channel failed (id={id}): {e}")
        raise
    return dump_named("channel_movies", result)


@mcp.tool(
    name="list_shows_in_channel",
    description="Get shows in channel",
    annotations=ToolAnnotations(title="List Shows In Channel", readOnlyHint=True),
)
async def list_shows_in_channel(
    id: Annotated[str, Field(description="Channel Id")],
    limit: Annotated[int, Field(description="How many shows to return")] = 50,
    offset: Annotated[int, Field(description="Offset to start returning items")] = 0,
) -> dict[str, Any]:
    """List shows scheduled on a channel."""
    logger.debug(f"list_shows_in_channel called (id={id}, limit={limit}, offset={offset})")
    try:
        result = await get_client().list_shows_in_channel(id, offset=offset, limit=limit)
    except TunarrError as e:
        logger.error(f"list_shows_in_channel failed (id={id}): {e}")
        raise
    return dump_named("channel_shows", result)


@mcp.tool(
    name="list_media_sources",
    description="Get configured media sources (Plex, Jellyfin, Emby, Local)",
    annotations=ToolAnnotations(title="List Media Sources", readOnlyHint=True),
)
async def list_media_sources() -> dict[str, Any]:
    """List configured media sources and their libraries."""
    logger.debug(f"list_media_sources called (host={get_client().base_url})")
    try:
        result = await get_client().list_media_sources()
    except TunarrError as e:
        logger.error(f"list_media_sources failed: {e}")
        raise
    return dump_named("media_source_list", result)


# Parameter names below are the tool's public argument names
@mcp.tool(
    name="search_programs",
    description="Search for programs (movies, shows, episodes, music) across media sources",
    annotations=ToolAnnotations(title="Search Programs", readOnlyHint=True),
)
async def search_programs(
    query: Annotated[
        SearchQuery,
        Field(description="Search query object containing search text, filters, and sort options"),
    ],
    mediaSourceId: Annotated[Optional[str], Field(description="Filter by media source ID")] = None,
    libraryId: Annotated[Optional[str], Field(description="Filter by library ID")] = None,
    page: Annotated[int, Field(description="Page number")] = 1,
    limit: Annotated[int, Field(description="Number of results per page")] = 50,
) -> dict[str, Any]:
    """Search programs with free text, a filter tree and sorting."""
    logger.debug(
        f"search_programs called (query={query.query!r}, mediaSourceId={mediaSourceId}, "
        f"libraryId={libraryId}, page={page}, limit={limit})"
    )
    request = SearchProgramsRequest(
        query=query,
        media_source_id=mediaSourceId,
        library_id=libraryId,
        page=page,
        limit=limit,
    )
    try:
        result = await get_client().search_programs(request)
    except TunarrError as e:
        logger.error(f"search_programs failed: {e}")
        raise
    return dump_named("search_results", result)


def run_server(settings: Settings) -> None:
    """Run the tool server on the configured transport until it exits."""
    transport = settings.mcp

    kwargs: dict[str, Any] = {}
    if transport.transport != "stdio":
        if not transport.bind or not transport.port:
            raise ValueError(f"bind and port are required for the {transport.transport} transport")
        kwargs = {"host": transport.bind, "port": transport.port}
        if transport.path:
            kwargs["path"] = transport.path

    configure(settings)
    logger.info(f"Tunarr tool server starting ({transport.transport})")
    try:
        mcp.run(transport=transport.transport, **kwargs)
    finally:
        logger.info("Tunarr tool server stopped")
