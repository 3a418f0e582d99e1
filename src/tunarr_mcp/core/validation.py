"""Validation engine shared by every shape in ``tunarr_mcp.models``.

Shapes are plain pydantic types: models, discriminated unions and lists of
them. This module adds the pieces pydantic does not ship directly:

* ``fallback(default)``: catch-and-fallback for a single field. The field is
  parsed normally; if that fails, ``default`` is substituted and validation of
  the sibling fields continues.
* ``validate(shape, data)``: run a shape and convert pydantic's
  ``ValidationError`` into ``SchemaValidationError`` with full paths.
* ``decode_json(text)``: ``json.loads`` without a nesting limit.
* ``dump(shape, value)``: serialize a typed value back to wire JSON.
"""

import json
import re
from json.decoder import scanstring
from typing import Any, Optional, TypeVar

from loguru import logger
from pydantic import TypeAdapter, ValidationError, ValidatorFunctionWrapHandler, WrapValidator

from tunarr_mcp.core.exceptions import SchemaValidationError, ValidationIssue

T = TypeVar("T")


def fallback(default: Any) -> WrapValidator:
    """
    Build a validator that replaces an invalid value with ``default``.

    Use inside ``Annotated`` together with the same value as the field's
    default, so that an absent field and a malformed one both end up as
    ``default``.

    Args:
        default: Value substituted when strict parsing fails

    Returns:
        WrapValidator usable as ``Annotated`` metadata
    """

    def _validate(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError as e:
            logger.debug(
                f"Invalid value {value!r} replaced by default {default!r}: "
                f"{e.error_count()} error(s)"
            )
            return default

    return WrapValidator(_validate)


def adapter_for(shape: Any) -> TypeAdapter:
    """Return a ``TypeAdapter`` for ``shape`` (adapters are passed through)."""
    if isinstance(shape, TypeAdapter):
        return shape
    return TypeAdapter(shape)


def shape_name(shape: Any) -> str:
    """Human readable name of a shape for error messages."""
    if isinstance(shape, TypeAdapter):
        shape = getattr(shape, "_type", shape)
    return getattr(shape, "__name__", None) or str(shape)


def validate(shape: Any, data: Any, name: Optional[str] = None) -> Any:
    """
    Validate ``data`` against ``shape``.

    Args:
        shape: pydantic model, annotated type or ``TypeAdapter``
        data: Untrusted, JSON-decoded input
        name: Shape name used in error messages

    Returns:
        The fully typed value

    Raises:
        SchemaValidationError: ``data`` does not conform to ``shape``
    """
    adapter = adapter_for(shape)
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise SchemaValidationError.from_pydantic(name or shape_name(shape), e) from e


_WHITESPACE = re.compile(r"[ \t\n\r]*")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][-+]?[0-9]+)?")
_LITERALS = (("true", True), ("false", False), ("null", None))


def _skip(text: str, pos: int) -> int:
    return _WHITESPACE.match(text, pos).end()


def _object_key(text: str, pos: int) -> tuple[str, int]:
    """Read ``"key" :`` at ``pos``; return the key and the start of its value."""
    if text[pos:pos + 1] != '"':
        raise json.JSONDecodeError("Expecting property name enclosed in double quotes", text, pos)
    key, pos = scanstring(text, pos + 1)
    pos = _skip(text, pos)
    if text[pos:pos + 1] != ":":
        raise json.JSONDecodeError("Expecting ':' delimiter", text, pos)
    return key, _skip(text, pos + 1)


def _scalar(text: str, pos: int) -> tuple[Any, int]:
    if text[pos:pos + 1] == '"':
        return scanstring(text, pos + 1)
    for literal, value in _LITERALS:
        if text.startswith(literal, pos):
            return value, pos + len(literal)
    match = _NUMBER.match(text, pos)
    if match is None:
        raise json.JSONDecodeError("Expecting value", text, pos)
    if match.group(1) or match.group(2):
        return float(match.group()), match.end()
    return int(match.group()), match.end()


def _decode_nested(text: str) -> Any:
    """
    Decode JSON with an explicit stack of open containers.

    Used when a document nests deeper than the interpreter's recursion limit
    allows ``json.loads`` to go.
    """
    # Each entry is an open container and, for objects, the key being filled
    open_containers: list[list[Any]] = []
    pos = _skip(text, 0)
    while True:
        char = text[pos:pos + 1]
        if char in ("{", "["):
            pos = _skip(text, pos + 1)
            closer = "}" if char == "{" else "]"
            if text[pos:pos + 1] == closer:
                value: Any = {} if char == "{" else []
                pos += 1
            elif char == "{":
                key, pos = _object_key(text, pos)
                open_containers.append([{}, key])
                continue
            else:
                open_containers.append([[], None])
                continue
        else:
            value, pos = _scalar(text, pos)

        # Attach the finished value, closing every container that ends here
        while True:
            if not open_containers:
                pos = _skip(text, pos)
                if pos != len(text):
                    raise json.JSONDecodeError("Extra data", text, pos)
                return value
            entry = open_containers[-1]
            container = entry[0]
            if isinstance(container, list):
                container.append(value)
            else:
                container[entry[1]] = value
            pos = _skip(text, pos)
            char = text[pos:pos + 1]
            if char == ",":
                pos = _skip(text, pos + 1)
                if isinstance(container, dict):
                    entry[1], pos = _object_key(text, pos)
                break
            if char == ("]" if isinstance(container, list) else "}"):
                open_containers.pop()
                value = container
                pos += 1
                continue
            raise json.JSONDecodeError("Expecting ',' delimiter", text, pos)


def decode_json(text: str | bytes) -> Any:
    """
    Decode a JSON document of any nesting depth.

    Raises:
        json.JSONDecodeError: ``text`` is not JSON
        UnicodeDecodeError: ``text`` is bytes that are not UTF-8/16/32
    """
    try:
        return json.loads(text)
    except RecursionError:
        logger.debug("JSON document nests too deep for json.loads, decoding with a stack")
    if isinstance(text, (bytes, bytearray)):
        text = text.decode(json.detect_encoding(text), "surrogatepass")
    return _decode_nested(text)


def decode_document(text: str | bytes, name: str) -> Any:
    """
    Decode a JSON document, reporting bad input against shape ``name``.

    Raises:
        SchemaValidationError: ``text`` is not a JSON document
    """
    try:
        return decode_json(text)
    except json.JSONDecodeError as e:
        issue = ValidationIssue(loc=(), message=f"Invalid JSON: {e.msg}", kind="json_invalid")
        raise SchemaValidationError(name, [issue]) from e
    except UnicodeDecodeError as e:
        issue = ValidationIssue(loc=(), message=f"Invalid JSON: {e.reason}", kind="json_invalid")
        raise SchemaValidationError(name, [issue]) from e


def validate_text(shape: Any, text: str | bytes, name: Optional[str] = None) -> Any:
    """Decode a JSON document and validate it against ``shape``."""
    label = name or shape_name(shape)
    return validate(shape, decode_document(text, label), name=label)


def dump(shape: Any, value: Any, exclude_unset: bool = False) -> Any:
    """Serialize a typed value to JSON-ready data using wire field names."""
    return adapter_for(shape).dump_python(
        value,
        mode="json",
        by_alias=True,
        exclude_unset=exclude_unset,
    )
