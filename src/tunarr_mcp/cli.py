"""Command-line interface for the Tunarr tool server."""

import asyncio
import sys
from pathlib import Path
from typing import Optional, get_origin

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tunarr_mcp.core.config import get_settings, log_settings
from tunarr_mcp.core.exceptions import SchemaValidationError, TunarrError
from tunarr_mcp.core.logger import setup_logging

app = typer.Typer(
    name="tunarr-mcp",
    help="Tunarr MCP - typed tool server for the Tunarr API",
    add_completion=False,
)

# Force UTF-8 output on Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

console = Console()


@app.command()
def serve(
    transport: Optional[str] = typer.Option(
        None, "--transport", "-t", help="stdio, sse or streamable-http"
    ),
    bind: Optional[str] = typer.Option(None, "--bind", "-b", help="Address to bind (HTTP transports)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (HTTP transports)"),
    path: Optional[str] = typer.Option(None, "--path", help="URL path of the endpoint"),
) -> None:
    """Run the tool server."""
    settings = get_settings()

    if transport:
        if transport not in ("stdio", "sse", "streamable-http"):
            console.print(f"[red]Unknown transport:[/red] {transport}")
            raise typer.Exit(2)
        settings.mcp_transport = transport
    if bind:
        settings.mcp_bind = bind
    if port:
        settings.mcp_port = port
    if path:
        settings.mcp_path = path

    setup_logging(level=settings.log_level, log_dir=settings.log_path)
    log_settings(settings)

    from tunarr_mcp.server import run_server

    try:
        run_server(settings)
    except ValueError as e:
        # stdout belongs to the stdio transport
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(1)


@app.command()
def validate(
    shape: str = typer.Argument(..., help="Shape name (see `tunarr-mcp shapes`)"),
    file: Path = typer.Argument(..., help="JSON document to validate", exists=True, dir_okay=False),
) -> None:
    """Validate a JSON document against a named shape."""
    from tunarr_mcp.models.registry import shape_names, validate_named_text

    if shape not in shape_names():
        console.print(f"[red]Unknown shape:[/red] {shape}")
        console.print(f"Known shapes: {', '.join(shape_names())}")
        raise typer.Exit(2)

    try:
        validate_named_text(shape, file.read_bytes())
    except SchemaValidationError as e:
        table = Table(title=f"{file.name}: invalid {shape}")
        table.add_column("Path", style="cyan")
        table.add_column("Problem", style="red")
        table.add_column("Kind", style="dim")
        for issue in e.issues:
            table.add_row(escape(issue.path or "<root>"), escape(issue.message), issue.kind)
        console.print(table)
        raise typer.Exit(1)

    console.print(f"[green]{file.name}:[/green] valid {shape}")


@app.command()
def shapes() -> None:
    """List the shape names accepted by `validate`."""
    from tunarr_mcp.models.registry import SHAPES, shape_names

    table = Table(title="Shapes")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Kind", style="green", no_wrap=True)
    for name in shape_names():
        kind = "list" if get_origin(SHAPES[name]) is list else "object"
        table.add_row(name, kind)
    console.print(table)


@app.command()
def channels() -> None:
    """List channels on the configured Tunarr server."""
    settings = get_settings()
    setup_logging(level="WARNING")

    from tunarr_mcp.clients.tunarr import TunarrClient

    async def _run():
        client = TunarrClient(settings.tunarr.host, timeout=settings.tunarr.timeout)
        try:
            return await client.list_channels()
        finally:
            await client.close()

    try:
        result = asyncio.run(_run())
    except TunarrError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Channels ({settings.tunarr.host})")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Group")
    table.add_column("Stream mode", style="yellow")
    table.add_column("Programs", justify="right")

    for channel in sorted(result.channels, key=lambda c: c.number):
        table.add_row(
            str(channel.number),
            escape(channel.name),
            channel.group_title or "",
            channel.stream_mode.value,
            str(channel.program_count),
        )
    console.print(table)


@app.command()
def search(
    text: str = typer.Argument(..., help="Search text"),
    media_source: Optional[str] = typer.Option(None, "--media-source", "-m", help="Media source ID"),
    library: Optional[str] = typer.Option(None, "--library", "-l", help="Library ID"),
    page: int = typer.Option(1, "--page", help="Page number"),
    limit: int = typer.Option(20, "--limit", "-n", help="Results per page"),
) -> None:
    """Search programs on the configured Tunarr server."""
    settings = get_settings()
    setup_logging(level="WARNING")

    from tunarr_mcp.clients.tunarr import TunarrClient, search_request

    async def _run():
        client = TunarrClient(settings.tunarr.host, timeout=settings.tunarr.timeout)
        try:
            request = search_request(
                query=text,
                media_source_id=media_source,
                library_id=library,
                page=page,
                limit=limit,
            )
            return await client.search_programs(request)
        finally:
            await client.close()

    try:
        result = asyncio.run(_run())
    except TunarrError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not result.results:
        console.print(f"[yellow]No results for[/yellow] {text!r}")
        return

    table = Table(title=f"Results for {text!r} (page {page})")
    table.add_column("Type", style="yellow")
    table.add_column("Title", style="green")
    table.add_column("ID", style="dim")
    for item in result.results:
        table.add_row(item.type, escape(item.display_title), item.uuid)
    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
