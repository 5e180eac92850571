"""Strict accessors for fields of a decoded JSON object.

A single lookup is shared by two failure policies: ``optional`` turns a
missing or mistyped value into ``None`` while ``required`` raises, so the
caller can short-circuit the whole decode on the first bad field.
"""
from typing import Annotated, Any, Mapping, TypeVar

from pydantic import AfterValidator, StrictInt, StrictStr, TypeAdapter, ValidationError
from rfc3986_validator import validate_rfc3986

from payment_setup.errors import InvalidFieldError, MissingFieldError

T = TypeVar("T")


def _check_url_reference(value: str) -> str:
    # A trailing newline would slip past the validator's "$" anchor.
    if not value or value.endswith("\n") or not validate_rfc3986(value, rule="URI_reference"):
        raise ValueError("not an RFC 3986 URI reference")
    return value


# Any absolute or relative URI reference, kept exactly as written in the payload.
UrlReference = Annotated[StrictStr, AfterValidator(_check_url_reference)]

STRICT_INT: TypeAdapter[int] = TypeAdapter(StrictInt)
STRICT_STR: TypeAdapter[str] = TypeAdapter(StrictStr)
OBJECT: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])
# An array holding anything other than objects is mistyped as a whole.
RECORDS: TypeAdapter[list[dict[str, Any]]] = TypeAdapter(list[dict[str, Any]])
URL: TypeAdapter[str] = TypeAdapter(UrlReference)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_input=False, include_url=False)
    return errors[0]["msg"] if errors else "validation failed"


def _path(key: str, parent: str | None) -> str:
    return f"{parent}.{key}" if parent else key


def optional(mapping: Mapping[str, Any], key: str, kind: TypeAdapter[T]) -> T | None:
    """Return ``mapping[key]`` validated strictly against ``kind``, or None.

    Absent keys, JSON nulls and values of the wrong type all yield None.
    """
    value = mapping.get(key)
    if value is None:
        return None
    try:
        return kind.validate_python(value, strict=True)
    except ValidationError:
        return None


def required(
    mapping: Mapping[str, Any],
    key: str,
    kind: TypeAdapter[T],
    parent: str | None = None,
) -> T:
    """
    Return ``mapping[key]`` validated strictly against ``kind``.

    Args:
        mapping: JSON object to read from.
        key: Field name.
        kind: One of the strict adapters defined in this module.
        parent: Dotted path of ``mapping`` inside the payload, for diagnostics.

    Raises:
        MissingFieldError: If the key is absent or null.
        InvalidFieldError: If the value does not satisfy ``kind``.
    """
    path = _path(key, parent)
    value = mapping.get(key)
    if value is None:
        raise MissingFieldError(path)
    try:
        return kind.validate_python(value, strict=True)
    except ValidationError as exc:
        raise InvalidFieldError(path, _first_error(exc)) from exc
