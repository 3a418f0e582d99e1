"""API clients for external services."""

from tunarr_mcp.clients.base import BaseClient
from tunarr_mcp.clients.tunarr import TunarrClient, search_request

__all__ = [
    "BaseClient",
    "TunarrClient",
    "search_request",
]
