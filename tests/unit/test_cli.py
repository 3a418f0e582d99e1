"""Unit tests for the command-line interface."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from loguru import logger
from typer.testing import CliRunner

from tunarr_mcp.cli import app
from tunarr_mcp.clients.tunarr import TunarrClient
from tunarr_mcp.core.exceptions import TransportError
from tunarr_mcp.models.registry import validate_named

runner = CliRunner()


@pytest.fixture(autouse=True)
def _drop_log_sinks():
    """Commands add sinks bound to the runner's streams; remove them afterwards."""
    yield
    logger.remove()


def test_shapes() -> None:
    result = runner.invoke(app, ["shapes"])
    assert result.exit_code == 0
    assert "search_request" in result.output


def test_validate_valid_file(tmp_path: Path, make_item) -> None:
    document = tmp_path / "item.json"
    document.write_text(json.dumps(make_item("movie")), encoding="utf-8")

    result = runner.invoke(app, ["validate", "content_item", str(document)])

    assert result.exit_code == 0
    assert "valid content_item" in result.output


def test_validate_invalid_file(tmp_path: Path, make_item) -> None:
    """Issues are listed and the exit code is 1."""
    document = tmp_path / "items.json"
    document.write_text(json.dumps([make_item("movie"), {"type": "movie"}]), encoding="utf-8")

    result = runner.invoke(app, ["validate", "content_items", str(document)])

    assert result.exit_code == 1
    assert "[1].movie.uuid" in result.output


def test_validate_unknown_shape(tmp_path: Path) -> None:
    document = tmp_path / "x.json"
    document.write_text("{}", encoding="utf-8")

    result = runner.invoke(app, ["validate", "nope", str(document)])

    assert result.exit_code == 2


def test_channels(monkeypatch, channel_payload) -> None:
    channels = validate_named("channel_list", {"channels": [channel_payload]})
    monkeypatch.setattr(TunarrClient, "list_channels", AsyncMock(return_value=channels))

    result = runner.invoke(app, ["channels"])

    assert result.exit_code == 0
    assert "Movies" in result.output


def test_channels_transport_error(monkeypatch) -> None:
    monkeypatch.setattr(
        TunarrClient,
        "list_channels",
        AsyncMock(side_effect=TransportError("Unable to list channels", 500)),
    )

    result = runner.invoke(app, ["channels"])

    assert result.exit_code == 1
    assert "Unable to list channels" in result.output


def test_search(monkeypatch, make_item) -> None:
    """search sends the text and prints each hit."""
    results = validate_named("search_results", {"results": [make_item("show", title="Lost")]})
    search = AsyncMock(return_value=results)
    monkeypatch.setattr(TunarrClient, "search_programs", search)

    result = runner.invoke(app, ["search", "lost", "--limit", "5"])

    assert result.exit_code == 0
    assert "Lost" in result.output
    request = search.call_args.args[0]
    assert request.to_body() == {"query": {"query": "lost"}, "page": 1, "limit": 5}


def test_validate_deep_filter(tmp_path: Path) -> None:
    """A 1000-level filter file validates without hitting the recursion limit."""
    leaf = {"type": "value", "fieldSpec": {"key": "genre", "name": "Genre", "type": "string", "op": "in", "value": ["x"]}}
    depth = 1000
    text = '{"type":"op","op":"or","children":[' * depth + json.dumps(leaf) + "]}" * depth
    document = tmp_path / "filter.json"
    document.write_text(text, encoding="utf-8")

    result = runner.invoke(app, ["validate", "filter", str(document)])

    assert result.exit_code == 0
    assert "valid filter" in result.output
