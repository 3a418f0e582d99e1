"""Shared fixtures: minimal Tunarr payloads and an isolated settings environment."""

import copy
from pathlib import Path
from typing import Any, Callable

import pytest

from tunarr_mcp.core.config import get_settings

MOVIE_UUID = "0c8b5a4e-1f7d-4b7e-9a51-3d2f6c8e9b10"
LIBRARY_UUID = "7a1d3c9e-52b4-4e0f-8c6a-9b2e1f4d7a35"

_BASE_ITEM: dict[str, Any] = {
    "uuid": MOVIE_UUID,
    "canonicalId": "canon-1",
    "sourceType": "plex",
    "externalId": "12345",
    "identifiers": [{"id": "tt0133093", "type": "imdb"}],
    "title": "The Matrix",
    "sortTitle": "Matrix",
    "tags": [],
    "mediaSourceId": "source-1",
    "libraryId": "library-1",
}

# One representative instance per kind, each carrying its kind-specific fields
_ITEM_FIELDS: dict[str, dict[str, Any]] = {
    "movie": {
        "originalTitle": None,
        "year": 1999,
        "releaseDate": None,
        "releaseDateString": None,
        "duration": 8160000,
    },
    "show": {"childCount": 5, "grandchildCount": 62},
    "season": {"index": 1},
    "episode": {"duration": 2820000, "episodeNumber": 3},
    "artist": {"childCount": 4},
    "album": {"year": 1997, "childCount": 12},
    "track": {"duration": 245000, "index": 2},
}

_CHANNEL: dict[str, Any] = {
    "id": "channel-1",
    "name": "Movies",
    "number": 1,
    "groupTitle": "tunarr",
    "duration": 86400000,
    "startTime": 1700000000000,
    "programCount": 12,
    "guideMinimumDuration": 30000,
    "icon": {"path": "", "width": 0, "duration": 0, "position": "bottom-right"},
    "offline": {"mode": "pic"},
    "stealth": False,
    "streamMode": "hls",
    "transcodeConfigId": "transcode-1",
    "onDemand": {"enabled": False},
    "subtitlesEnabled": False,
    "disableFillerOverlay": False,
}

_LIBRARY: dict[str, Any] = {
    "id": LIBRARY_UUID,
    "name": "Films",
    "mediaType": "movies",
    "externalKey": "1",
    "type": "plex",
    "enabled": True,
    "isLocked": False,
}

_PLEX_SOURCE: dict[str, Any] = {
    "id": "source-1",
    "name": "Plex",
    "type": "plex",
    "libraries": [_LIBRARY],
    "pathReplacements": [],
    "uri": "http://plex.local:32400",
    "accessToken": "token",
    "userId": None,
    "username": None,
    "sendGuideUpdates": False,
    "index": 0,
}


@pytest.fixture
def make_item() -> Callable[..., dict[str, Any]]:
    """Build a valid item payload of the given kind, with overrides."""

    def _make(kind: str, **overrides: Any) -> dict[str, Any]:
        payload = copy.deepcopy(_BASE_ITEM)
        payload.update(copy.deepcopy(_ITEM_FIELDS[kind]))
        payload["type"] = kind
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def channel_payload() -> dict[str, Any]:
    """A channel with every required field and no optional ones."""
    return copy.deepcopy(_CHANNEL)


@pytest.fixture
def library_payload() -> dict[str, Any]:
    """A Plex movie library."""
    return copy.deepcopy(_LIBRARY)


@pytest.fixture
def plex_source_payload() -> dict[str, Any]:
    """A Plex media source with one library."""
    return copy.deepcopy(_PLEX_SOURCE)


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, temp_config_dir: Path):
    """Point settings at an empty config dir and drop cached settings."""
    monkeypatch.setenv("CONFIG_PATH", str(temp_config_dir))
    for name in (
        "TUNARR_HOST",
        "TUNARR_TIMEOUT",
        "MCP_TRANSPORT",
        "MCP_BIND",
        "MCP_PORT",
        "MCP_PATH",
        "LOG_LEVEL",
        "LOG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
