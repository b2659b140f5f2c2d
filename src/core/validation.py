"""Generic schema validation entry point.

Both call sites (local input checks and response decoding) go through
`validate`, so a pydantic model, an enum or a parametrised type like
`ListEnvelope[Project]` is interpreted the same way everywhere.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from core.errors import SchemaValidationError, Violation

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter[Any]:
    return TypeAdapter(schema)


def violations_from(exc: PydanticValidationError) -> list[Violation]:
    """Flatten a pydantic error into one `Violation` per failed field."""

    out: list[Violation] = []
    for err in exc.errors(include_url=False):
        path = ".".join(str(part) for part in err.get("loc", ()))
        out.append(Violation(path=path, reason=str(err.get("msg", "invalid value"))))
    return out


def validate(schema: type[T] | Any, value: Any) -> T:
    """Validate `value` against `schema` and return the typed result.

    Unknown extra fields on entities are dropped, optional fields default to
    `None`. Every violation is reported, not only the first.

    Raises:
        SchemaValidationError: when `value` does not match `schema`.
    """

    try:
        return _adapter(schema).validate_python(value)
    except PydanticValidationError as exc:
        raise SchemaValidationError(violations_from(exc)) from exc
