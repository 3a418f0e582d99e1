"""Unit tests for Tunarr client."""

import json
from unittest.mock import AsyncMock

import pytest

from tunarr_mcp.clients.tunarr import TunarrClient, search_request
from tunarr_mcp.core.exceptions import SchemaValidationError, TransportError
from tunarr_mcp.models.pages import ChannelList, ChannelMovies, ChannelShows, MediaSourceList


class _JsonResponse:
    """Minimal JSON response object for Tunarr client tests."""

    def __init__(self, data, status_code: int = 200):
        self._data = data
        self.status_code = status_code
        self.content = json.dumps(data).encode()

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise RuntimeError(f"HTTP {self.status_code}")

    def json(self):
        return self._data


class _ErrorResponse:
    """Failed response whose body must not be read."""

    def __init__(self, status_code: int):
        self.status_code = status_code

    def raise_for_status(self) -> None:
        raise AssertionError("raise_for_status should not be called")

    @property
    def content(self) -> bytes:
        raise AssertionError("body of a failed response should not be read")

    def json(self):
        raise AssertionError("body of a failed response should not be read")


class _RawResponse:
    """Successful response with an arbitrary body."""

    def __init__(self, body: bytes):
        self.status_code = 200
        self.content = body


@pytest.fixture
def client() -> TunarrClient:
    return TunarrClient(url="http://tunarr.local:8000/")


def test_base_url_normalized(client: TunarrClient) -> None:
    """Trailing slashes are dropped from the server URL."""
    assert client.base_url == "http://tunarr.local:8000"


@pytest.mark.asyncio
async def test_list_channels(client: TunarrClient, channel_payload) -> None:
    """Channels are fetched and validated."""
    client.get = AsyncMock(return_value=_JsonResponse([channel_payload]))

    result = await client.list_channels()

    assert isinstance(result, ChannelList)
    assert result.channels[0].id == "channel-1"
    client.get.assert_awaited_once_with("/api/channels")


@pytest.mark.asyncio
async def test_list_channels_reports_bad_index(client: TunarrClient, channel_payload) -> None:
    """A malformed channel is a validation error naming its index."""
    broken = dict(channel_payload, streamMode="dash")
    client.get = AsyncMock(return_value=_JsonResponse([channel_payload, broken]))

    with pytest.raises(SchemaValidationError) as exc_info:
        await client.list_channels()

    assert exc_info.value.paths == ["channels[1].streamMode"]


@pytest.mark.asyncio
async def test_list_movies_in_channel(client: TunarrClient, make_item) -> None:
    """Movie pages are requested with type=movie and reshaped."""
    client.get = AsyncMock(
        return_value=_JsonResponse({"total": 1, "result": [make_item("movie")], "size": 1})
    )

    result = await client.list_movies_in_channel("channel-1", offset=10, limit=5)

    assert isinstance(result, ChannelMovies)
    assert result.total == 1
    assert result.movies[0].title == "The Matrix"
    client.get.assert_awaited_once_with(
        "/api/channels/channel-1/programs",
        params={"type": "movie", "offset": 10, "limit": 5},
    )


@pytest.mark.asyncio
async def test_list_movies_default_paging(client: TunarrClient) -> None:
    """offset and limit default to 0 and 50."""
    client.get = AsyncMock(return_value=_JsonResponse({"total": 0, "result": [], "size": 0}))

    await client.list_movies_in_channel("channel-1")

    assert client.get.call_args.kwargs["params"] == {"type": "movie", "offset": 0, "limit": 50}


@pytest.mark.asyncio
async def test_list_movies_rejects_other_kinds(client: TunarrClient, make_item) -> None:
    """A non-movie in a movie page fails validation."""
    client.get = AsyncMock(
        return_value=_JsonResponse({"total": 1, "result": [make_item("episode")], "size": 1})
    )

    with pytest.raises(SchemaValidationError) as exc_info:
        await client.list_movies_in_channel("channel-1")

    assert all(issue.loc[:2] == ("result", 0) for issue in exc_info.value.issues)


@pytest.mark.asyncio
async def test_list_shows_in_channel(client: TunarrClient, make_item) -> None:
    """Show pages come from the shows endpoint."""
    client.get = AsyncMock(
        return_value=_JsonResponse({"total": 3, "result": [make_item("show")], "size": 1})
    )

    result = await client.list_shows_in_channel("channel-1")

    assert isinstance(result, ChannelShows)
    assert result.total == 3
    assert result.shows[0].grandchild_count == 62
    client.get.assert_awaited_once_with(
        "/api/channels/channel-1/shows",
        params={"offset": 0, "limit": 50},
    )


@pytest.mark.asyncio
async def test_list_media_sources(client: TunarrClient, plex_source_payload) -> None:
    """Media sources are wrapped and validated."""
    client.get = AsyncMock(return_value=_JsonResponse([plex_source_payload]))

    result = await client.list_media_sources()

    assert isinstance(result, MediaSourceList)
    assert result.media_sources[0].type == "plex"
    client.get.assert_awaited_once_with("/api/media-sources")


@pytest.mark.asyncio
async def test_search_programs(client: TunarrClient, make_item) -> None:
    """Search posts the request body and returns mixed kinds."""
    client.post = AsyncMock(
        return_value=_JsonResponse({"results": [make_item("movie"), make_item("track")], "total": 2})
    )
    request = search_request("matrix", media_source_id="source-1")

    result = await client.search_programs(request)

    assert [item.type for item in result.results] == ["movie", "track"]
    client.post.assert_awaited_once_with(
        "/api/programs/search",
        json={"query": {"query": "matrix"}, "page": 1, "limit": 50, "mediaSourceId": "source-1"},
    )


@pytest.mark.asyncio
async def test_search_programs_from_dict(client: TunarrClient) -> None:
    """A JSON request is validated before sending."""
    client.post = AsyncMock(return_value=_JsonResponse({"results": []}))

    result = await client.search_programs({"query": {"query": "x"}, "page": 3})

    assert result.results == []
    assert client.post.call_args.kwargs["json"]["page"] == 3


@pytest.mark.asyncio
async def test_search_programs_invalid_request_not_sent(client: TunarrClient) -> None:
    """An invalid request fails before any HTTP call."""
    client.post = AsyncMock()

    with pytest.raises(SchemaValidationError):
        await client.search_programs({"query": {"filter": {"type": "op"}}})

    client.post.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_programs_missing_results(client: TunarrClient) -> None:
    """A body without results is a validation error."""
    client.post = AsyncMock(return_value=_JsonResponse({"items": []}))

    with pytest.raises(SchemaValidationError) as exc_info:
        await client.search_programs(search_request("x"))

    assert exc_info.value.paths == ["results"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,call,message",
    [
        ("get", lambda c: c.list_channels(), "Unable to list channels"),
        ("get", lambda c: c.list_movies_in_channel("channel-1"), "Unable to list movies in channel"),
        ("get", lambda c: c.list_shows_in_channel("channel-1"), "Unable to list shows in channel"),
        ("get", lambda c: c.list_media_sources(), "Unable to list media sources"),
        ("post", lambda c: c.search_programs(search_request("x")), "Unable to search programs"),
    ],
)
@pytest.mark.parametrize("status_code", [404, 500])
async def test_transport_errors(client: TunarrClient, method, call, message, status_code) -> None:
    """Non-2xx responses raise a transport error named after the operation."""
    setattr(client, method, AsyncMock(return_value=_ErrorResponse(status_code)))

    with pytest.raises(TransportError) as exc_info:
        await call(client)

    assert str(exc_info.value) == message
    assert exc_info.value.status_code == status_code


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,call,shape",
    [
        ("get", lambda c: c.list_channels(), "channel_list"),
        ("get", lambda c: c.list_movies_in_channel("channel-1"), "movie_page"),
        ("get", lambda c: c.list_shows_in_channel("channel-1"), "show_page"),
        ("get", lambda c: c.list_media_sources(), "media_source_list"),
        ("post", lambda c: c.search_programs(search_request("x")), "search_results"),
    ],
)
async def test_non_json_body_is_validation_error(client: TunarrClient, method, call, shape) -> None:
    """A 2xx response that is not JSON fails validation against the expected shape."""
    setattr(client, method, AsyncMock(return_value=_RawResponse(b"<html>")))

    with pytest.raises(SchemaValidationError) as exc_info:
        await call(client)

    assert exc_info.value.shape == shape
    assert exc_info.value.issues[0].kind == "json_invalid"
    assert exc_info.value.issues[0].message.startswith("Invalid JSON")


@pytest.mark.asyncio
async def test_empty_body_is_validation_error(client: TunarrClient) -> None:
    client.get = AsyncMock(return_value=_RawResponse(b""))

    with pytest.raises(SchemaValidationError):
        await client.list_channels()


@pytest.mark.asyncio
async def test_redirect_status_is_failure(client: TunarrClient) -> None:
    """Only 2xx counts as success."""
    client.get = AsyncMock(return_value=_ErrorResponse(304))

    with pytest.raises(TransportError):
        await client.list_channels()


@pytest.mark.asyncio
async def test_close(client: TunarrClient) -> None:
    """close() releases the HTTP client."""
    async with client:
        pass
    assert client._client.is_closed
