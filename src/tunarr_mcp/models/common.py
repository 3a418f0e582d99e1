"""Vocabulary shared by program, channel and media source models."""

from enum import Enum
from typing import Annotated, Any, Optional, TypeVar, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

# Canonical 8-4-4-4-12 hex form, any version
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

UuidStr = Annotated[str, Field(pattern=UUID_PATTERN)]

_BOUND_ERRORS = {
    "ge": ("greater_than_equal", "Input should be greater than or equal to {ge}", lambda v, b: v >= b),
    "gt": ("greater_than", "Input should be greater than {gt}", lambda v, b: v > b),
    "le": ("less_than_equal", "Input should be less than or equal to {le}", lambda v, b: v <= b),
}


def number_type(**bounds: float) -> Any:
    """
    JSON number type with optional ``ge``/``gt``/``le`` bounds.

    Ints stay ints and floats stay floats. Strings and booleans are rejected
    rather than coerced.
    """

    def _check(value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError("number_type", "Input should be a valid number")
        for name, bound in bounds.items():
            kind, message, holds = _BOUND_ERRORS[name]
            if not holds(value, bound):
                raise PydanticCustomError(kind, message, {name: bound})
        return value

    return Annotated[Union[int, float], PlainValidator(_check, json_schema_input_type=Union[int, float])]


Number = number_type()
NonNegativeNumber = number_type(ge=0)
PositiveNumber = number_type(gt=0)
Percentage = number_type(ge=0, le=100)


def _reject_null(value: Any) -> Any:
    if value is None:
        raise PydanticCustomError("not_null", "May be omitted but not null")
    return value


NotNull = AfterValidator(_reject_null)

T = TypeVar("T")

# May be left out, but not sent as null; declare with a None default
Omittable = Annotated[Optional[T], NotNull]


class WireModel(BaseModel):
    """Base for every shape exchanged with Tunarr.

    Attributes are snake_case in Python and camelCase on the wire. Fields
    marked ``NotNull`` are left out of the output while unset, since ``null``
    is not a valid value for them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        for name, info in type(self).model_fields.items():
            if NotNull in info.metadata and getattr(self, name) is None:
                data.pop(name, None)
                if info.alias:
                    data.pop(info.alias, None)
        return data


class SourceType(str, Enum):
    """Kind of upstream media server."""

    PLEX = "plex"
    JELLYFIN = "jellyfin"
    EMBY = "emby"
    LOCAL = "local"


class ExternalIdType(str, Enum):
    """Namespace of an external identifier."""

    PLEX = "plex"
    PLEX_GUID = "plex-guid"
    IMDB = "imdb"
    TMDB = "tmdb"
    TVDB = "tvdb"
    JELLYFIN = "jellyfin"
    EMBY = "emby"


class Identifier(WireModel):
    """External reference to an item (e.g. its IMDb id)."""

    id: str
    source_id: Omittable[str] = None
    type: ExternalIdType


class SortDirection(str, Enum):
    """Sort direction for search results."""

    ASC = "asc"
    DESC = "desc"


class Sort(WireModel):
    """Sort configuration for search."""

    field: str = Field(description="Field to sort by")
    direction: SortDirection = Field(description="Sort direction")
