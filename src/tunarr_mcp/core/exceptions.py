"""Error types raised at the boundary between the remote service and callers."""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from pydantic import ValidationError


class TunarrError(Exception):
    """Base error for everything raised by this package."""


class TransportError(TunarrError):
    """The remote service answered with a non-success HTTP status."""

    def __init__(self, operation: str, status_code: Optional[int] = None):
        super().__init__(operation)
        self.operation = operation
        self.status_code = status_code

    def __str__(self) -> str:
        return self.operation


@dataclass(frozen=True)
class ValidationIssue:
    """One offending location inside a validated document."""

    loc: tuple[str | int, ...]
    message: str
    kind: str = "value_error"
    received: Any = None

    @property
    def path(self) -> str:
        """Render ``loc`` as ``results[1].duration``."""
        return format_loc(self.loc)

    def __str__(self) -> str:
        where = self.path or "<root>"
        return f"{where}: {self.message} (got {_describe(self.received)})"

    def prefixed(self, prefix: tuple[str | int, ...]) -> "ValidationIssue":
        """Return a copy of this issue relocated under ``prefix``."""
        return ValidationIssue(
            loc=prefix + self.loc,
            message=self.message,
            kind=self.kind,
            received=self.received,
        )


class SchemaValidationError(TunarrError, ValueError):
    """A payload does not conform to its declared shape.

    Subclasses ``ValueError`` so that, when raised from inside a pydantic
    field validator, pydantic reports it at the field's location and keeps
    the original exception in the error context for re-expansion.
    """

    def __init__(self, shape: str, issues: Iterable[ValidationIssue]):
        self.shape = shape
        self.issues = list(issues)
        super().__init__(self._render())

    def _render(self) -> str:
        count = len(self.issues)
        noun = "issue" if count == 1 else "issues"
        lines = [f"Invalid {self.shape}: {count} {noun}"]
        lines.extend(f"  {issue}" for issue in self.issues)
        return "\n".join(lines)

    @property
    def paths(self) -> list[str]:
        """Paths of every failing location, in report order."""
        return [issue.path for issue in self.issues]

    @classmethod
    def from_pydantic(
        cls,
        shape: str,
        error: ValidationError,
        prefix: tuple[str | int, ...] = (),
    ) -> "SchemaValidationError":
        """Convert a pydantic ``ValidationError`` into our own error type."""
        return cls(shape, issues_from_pydantic(error, prefix))


def issues_from_pydantic(
    error: ValidationError,
    prefix: tuple[str | int, ...] = (),
) -> list[ValidationIssue]:
    """Flatten pydantic error details into ``ValidationIssue`` records."""
    issues = []
    for detail in error.errors(include_url=False):
        loc = prefix + tuple(detail.get("loc", ()))
        nested = (detail.get("ctx") or {}).get("error")
        if isinstance(nested, SchemaValidationError):
            issues.extend(issue.prefixed(loc) for issue in nested.issues)
            continue
        issues.append(
            ValidationIssue(
                loc=loc,
                message=detail.get("msg", "invalid value"),
                kind=detail.get("type", "value_error"),
                received=detail.get("input"),
            )
        )
    return issues


def format_loc(loc: tuple[str | int, ...]) -> str:
    """Join a location tuple into a dotted path with ``[i]`` list indices."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def _describe(value: Any) -> str:
    """Short type-and-value description used in issue messages."""
    if value is None:
        return "null"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return f"array[{len(value)}]"
    text = repr(value)
    if len(text) > 40:
        text = text[:37] + "..."
    return f"{type(value).__name__} {text}"
