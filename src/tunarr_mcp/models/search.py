"""Program search request and result models."""

from typing import Any, Optional

from pydantic import Field, StrictInt

from tunarr_mcp.models.common import Sort, WireModel
from tunarr_mcp.models.content import ContentItem
from tunarr_mcp.models.filters import FilterTree, dump_filter


class SearchQuery(WireModel):
    """Search text, filter tree and sort order."""

    query: Optional[str] = Field(default=None, description="Search text")
    restrict_search_to: Optional[list[str]] = Field(
        default=None, description="Restrict search to specific fields"
    )
    filter: Optional[FilterTree] = Field(default=None, description="Advanced filter conditions")
    sort: Optional[Sort] = Field(default=None, description="Sort configuration")

    def to_wire(self) -> dict[str, Any]:
        """Serialize only the keys the caller set, the filter tree verbatim."""
        body = self.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=True,
            exclude={"filter"},
        )
        if "filter" in self.model_fields_set:
            body["filter"] = dump_filter(self.filter) if self.filter is not None else None
        return body


class SearchProgramsRequest(WireModel):
    """Arguments of a program search."""

    query: SearchQuery = Field(
        description="Search query object containing search text, filters, and sort options"
    )
    media_source_id: Optional[str] = Field(default=None, description="Filter by media source ID")
    library_id: Optional[str] = Field(default=None, description="Filter by library ID")
    page: StrictInt = Field(default=1, description="Page number")
    limit: StrictInt = Field(default=50, description="Number of results per page")

    def to_body(self) -> dict[str, Any]:
        """Build the POST body for ``/api/programs/search``."""
        body: dict[str, Any] = {
            "query": self.query.to_wire(),
            "page": self.page,
            "limit": self.limit,
        }
        if self.media_source_id:
            body["mediaSourceId"] = self.media_source_id
        if self.library_id:
            body["libraryId"] = self.library_id
        return body


class SearchProgramsResult(WireModel):
    """Items matching a search."""

    results: list[ContentItem]
