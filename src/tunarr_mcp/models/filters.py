"""Search filter models: field specs and the recursive and/or filter tree.

A filter tree is never evaluated locally. It is validated when it arrives as
tool input and forwarded unchanged in the search request body, so the only
operations here are parsing and re-serialization.

Trees have no depth bound. ``parse_filter`` and ``dump_filter`` walk them
with an explicit stack rather than recursion, so a deeply nested tree never
exhausts the interpreter stack or pydantic's recursion guard.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    Field,
    PlainSerializer,
    PlainValidator,
    StrictFloat,
    StrictInt,
    TypeAdapter,
    ValidationError,
)

from tunarr_mcp.core.exceptions import SchemaValidationError, ValidationIssue, issues_from_pydantic
from tunarr_mcp.core.validation import validate
from tunarr_mcp.models.common import WireModel

NonEmptyStr = Annotated[str, Field(min_length=1)]

StrictNumber = Union[StrictInt, StrictFloat]

# Scalar for comparisons, (low, high) pair for "to" ranges
NumericValue = Union[StrictNumber, tuple[StrictNumber, StrictNumber]]


class StringOperator(str, Enum):
    """Operators accepted by string and faceted string fields."""

    EQ = "="
    NE = "!="
    CONTAINS = "contains"
    STARTS_WITH = "starts with"
    IN = "in"
    NOT_IN = "not in"


class NumericOperator(str, Enum):
    """Operators accepted by numeric and date fields."""

    EQ = "="
    NE = "!="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    TO = "to"


class FilterCombinator(str, Enum):
    """Boolean combinator of an op node."""

    AND = "and"
    OR = "or"


class StringFieldSpec(WireModel):
    """Predicate over a free-text field."""

    key: NonEmptyStr
    name: NonEmptyStr
    type: Literal["string"]
    op: StringOperator
    value: list[str]


class FacetedStringFieldSpec(WireModel):
    """Predicate over a field with a fixed set of facet values."""

    key: NonEmptyStr
    name: NonEmptyStr
    # Tunarr's wire literal
    type: Literal["facted_string"]
    op: StringOperator
    value: list[str]


class NumericFieldSpec(WireModel):
    """Predicate over a numeric field."""

    key: NonEmptyStr
    name: NonEmptyStr
    type: Literal["numeric"]
    op: NumericOperator
    value: NumericValue


class DateFieldSpec(WireModel):
    """Predicate over a date field, values are epoch numbers."""

    key: NonEmptyStr
    name: NonEmptyStr
    type: Literal["date"]
    op: NumericOperator
    value: NumericValue


FieldSpec = Annotated[
    Union[StringFieldSpec, FacetedStringFieldSpec, NumericFieldSpec, DateFieldSpec],
    Field(discriminator="type"),
]


class FilterValue(WireModel):
    """Leaf of the filter tree: a single field predicate."""

    type: Literal["value"] = "value"
    field_spec: FieldSpec


class FilterOp(WireModel):
    """Inner node of the filter tree combining its children with and/or."""

    type: Literal["op"] = "op"
    op: FilterCombinator
    children: list["FilterNode"]


FilterNode = Annotated[Union[FilterOp, FilterValue], Field(discriminator="type")]

FilterOp.model_rebuild()


class _FilterOpHeader(WireModel):
    """An op node with its children left unparsed."""

    type: Literal["op"]
    op: FilterCombinator
    children: list[Any]


_FIELD_SPEC = TypeAdapter(FieldSpec)
_OP_HEADER = TypeAdapter(_FilterOpHeader)
_VALUE = TypeAdapter(FilterValue)

_TAGS = ("op", "value")


def parse_field_spec(data: Any) -> Union[StringFieldSpec, FacetedStringFieldSpec, NumericFieldSpec, DateFieldSpec]:
    """Validate a single field spec, dispatching on its ``type``."""
    return validate(_FIELD_SPEC, data, name="field spec")


def _parse_node(
    raw: Any,
    loc: tuple[str | int, ...],
    issues: list[ValidationIssue],
) -> tuple[Optional[Union[FilterOp, FilterValue]], list[Any]]:
    """Validate one node without descending; return it and its raw children."""
    if isinstance(raw, FilterValue):
        return raw, []
    if isinstance(raw, FilterOp):
        node = FilterOp.model_construct(type="op", op=raw.op, children=[None] * len(raw.children))
        return node, list(raw.children)

    if not isinstance(raw, dict):
        issues.append(
            ValidationIssue(loc=loc, message="Input should be an object", kind="model_type", received=raw)
        )
        return None, []

    tag = raw.get("type")
    try:
        if tag == "op":
            header = _OP_HEADER.validate_python(raw)
            node = FilterOp.model_construct(
                type="op",
                op=header.op,
                children=[None] * len(header.children),
            )
            return node, header.children
        if tag == "value":
            return _VALUE.validate_python(raw), []
    except ValidationError as e:
        issues.extend(issues_from_pydantic(e, loc))
        return None, []

    if tag is None:
        issues.append(
            ValidationIssue(
                loc=loc,
                message="Unable to extract tag using discriminator 'type'",
                kind="union_tag_not_found",
                received=raw,
            )
        )
    else:
        expected = ", ".join(repr(t) for t in _TAGS)
        issues.append(
            ValidationIssue(
                loc=loc + ("type",),
                message=f"Input tag {tag!r} does not match any of the expected tags: {expected}",
                kind="union_tag_invalid",
                received=tag,
            )
        )
    return None, []


def parse_filter(data: Any) -> Union[FilterOp, FilterValue]:
    """
    Validate a filter tree of any depth.

    Every node is checked; failures from all branches are collected and
    reported together with their paths (e.g. ``children[0].fieldSpec.op``).

    Args:
        data: JSON-decoded filter, or an already typed node

    Returns:
        Root node of the typed tree

    Raises:
        SchemaValidationError: Any node is malformed
    """
    issues: list[ValidationIssue] = []
    root: list[Any] = [None]
    # (raw node, location, parent's children slots, index in slots)
    stack: list[tuple[Any, tuple[str | int, ...], list[Any], int]] = [(data, (), root, 0)]

    while stack:
        raw, loc, slots, index = stack.pop()
        node, raw_children = _parse_node(raw, loc, issues)
        if node is None:
            continue
        slots[index] = node
        # Reversed so children are visited, and reported, in document order
        for i in reversed(range(len(raw_children))):
            stack.append((raw_children[i], loc + ("children", i), node.children, i))

    if issues:
        raise SchemaValidationError("filter", issues)
    return root[0]


def dump_filter(node: Union[FilterOp, FilterValue]) -> dict[str, Any]:
    """Serialize a filter tree of any depth back to its wire form."""
    root: list[Any] = [None]
    stack: list[tuple[Any, list[Any], int]] = [(node, root, 0)]

    while stack:
        current, slots, index = stack.pop()
        if isinstance(current, FilterValue):
            slots[index] = _VALUE.dump_python(current, mode="json", by_alias=True)
            continue
        children: list[Any] = [None] * len(current.children)
        slots[index] = {
            "type": "op",
            "op": FilterCombinator(current.op).value,
            "children": children,
        }
        for i, child in enumerate(current.children):
            stack.append((child, children, i))

    return root[0]


FilterTree = Annotated[
    Union[FilterOp, FilterValue],
    PlainValidator(parse_filter, json_schema_input_type=FilterNode),
    PlainSerializer(dump_filter),
]
"""Filter tree field type: validated and serialized with the stack walkers."""
