"""Tunarr API client for channels, media sources and program search."""

from typing import Any, Optional

from loguru import logger

from tunarr_mcp.clients.base import BaseClient
from tunarr_mcp.core.exceptions import TransportError
from tunarr_mcp.core.validation import decode_document
from tunarr_mcp.models.pages import ChannelList, ChannelMovies, ChannelShows, MediaSourceList
from tunarr_mcp.models.registry import validate_named
from tunarr_mcp.models.search import SearchProgramsRequest, SearchProgramsResult


class TunarrClient(BaseClient):
    """Client for the Tunarr REST API."""

    DEFAULT_LIMIT = 50

    def __init__(self, url: str, timeout: float = 30.0):
        """
        Initialize Tunarr client.

        Args:
            url: Tunarr server URL (e.g. http://localhost:8000)
            timeout: Request timeout in seconds
        """
        super().__init__(
            base_url=url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    @staticmethod
    def _ensure_success(response: Any, operation: str) -> None:
        """Raise ``TransportError`` for any non-2xx status; the body is not read."""
        if not 200 <= response.status_code < 300:
            logger.error(f"[Tunarr] {operation}: HTTP {response.status_code}")
            raise TransportError(operation, response.status_code)

    @staticmethod
    def _body(response: Any, shape: str) -> Any:
        """Decode a successful response; a non-JSON body is invalid ``shape`` data."""
        return decode_document(response.content, shape)

    @staticmethod
    def _field(payload: Any, key: str) -> Any:
        """Read ``key`` from an object payload, None for anything else."""
        return payload.get(key) if isinstance(payload, dict) else None

    # =========================================================================
    # Channels
    # =========================================================================

    async def list_channels(self) -> ChannelList:
        """Get all channels."""
        response = await self.get("/api/channels")
        self._ensure_success(response, "Unable to list channels")

        payload = self._body(response, "channel_list")
        channels: ChannelList = validate_named("channel_list", {"channels": payload})
        logger.info(f"[Tunarr] Channels: fetched {len(channels.channels)}")
        return channels

    async def list_movies_in_channel(
        self,
        channel_id: str,
        offset: int = 0,
        limit: int = DEFAULT_LIMIT,
    ) -> ChannelMovies:
        """
        Get movies scheduled on a channel.

        Args:
            channel_id: Channel ID
            offset: Offset to start returning items
            limit: How many movies to return

        Returns:
            Page of movies with the total count
        """
        response = await self.get(
            f"/api/channels/{channel_id}/programs",
            params={"type": "movie", "offset": offset, "limit": limit},
        )
        self._ensure_success(response, "Unable to list movies in channel")

        page = validate_named("movie_page", self._body(response, "movie_page"))
        logger.info(f"[Tunarr] Channel {channel_id}: {len(page.result)}/{page.total} movies")
        return ChannelMovies.from_page(page)

    async def list_shows_in_channel(
        self,
        channel_id: str,
        offset: int = 0,
        limit: int = DEFAULT_LIMIT,
    ) -> ChannelShows:
        """
        Get shows scheduled on a channel.

        Args:
            channel_id: Channel ID
            offset: Offset to start returning items
            limit: How many shows to return

        Returns:
            Page of shows with the total count
        """
        response = await self.get(
            f"/api/channels/{channel_id}/shows",
            params={"offset": offset, "limit": limit},
        )
        self._ensure_success(response, "Unable to list shows in channel")

        page = validate_named("show_page", self._body(response, "show_page"))
        logger.info(f"[Tunarr] Channel {channel_id}: {len(page.result)}/{page.total} shows")
        return ChannelShows.from_page(page)

    # =========================================================================
    # Media sources
    # =========================================================================

    async def list_media_sources(self) -> MediaSourceList:
        """Get configured media sources (Plex, Jellyfin, Emby, Local)."""
        response = await self.get("/api/media-sources")
        self._ensure_success(response, "Unable to list media sources")

        sources: MediaSourceList = validate_named(
            "media_source_list", {"mediaSources": self._body(response, "media_source_list")}
        )
        logger.info(f"[Tunarr] Media sources: fetched {len(sources.media_sources)}")
        return sources

    # =========================================================================
    # Search
    # =========================================================================

    async def search_programs(
        self,
        request: SearchProgramsRequest | dict[str, Any],
    ) -> SearchProgramsResult:
        """
        Search programs across media sources.

        Args:
            request: Typed request, or its JSON form (validated first)

        Returns:
            Matching items of every kind
        """
        if not isinstance(request, SearchProgramsRequest):
            request = validate_named("search_request", request)

        body = request.to_body()
        logger.debug(f"[Tunarr] Search body: {body}")

        response = await self.post("/api/programs/search", json=body)
        self._ensure_success(response, "Unable to search programs")

        payload = self._body(response, "search_results")
        results: SearchProgramsResult = validate_named(
            "search_results", {"results": self._field(payload, "results")}
        )
        logger.info(f"[Tunarr] Search page {request.page}: {len(results.results)} results")
        return results


def search_request(
    query: Optional[str] = None,
    filter: Optional[dict[str, Any]] = None,
    media_source_id: Optional[str] = None,
    library_id: Optional[str] = None,
    page: int = 1,
    limit: int = TunarrClient.DEFAULT_LIMIT,
) -> SearchProgramsRequest:
    """Build a validated search request from plain arguments."""
    query_obj: dict[str, Any] = {}
    if query is not None:
        query_obj["query"] = query
    if filter is not None:
        query_obj["filter"] = filter
    data: dict[str, Any] = {"query": query_obj, "page": page, "limit": limit}
    if media_source_id:
        data["mediaSourceId"] = media_source_id
    if library_id:
        data["libraryId"] = library_id
    return validate_named("search_request", data)
