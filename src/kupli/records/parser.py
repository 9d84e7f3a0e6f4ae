"""
Link record parser.

One line, space-separated tokens (runs of spaces count as one separator):

    line   := identifier object object [reserved...]
    object := "fragment" blob_id start_line start_col end_line end_col
            | "path" path_string

Tokens after the second object are reserved flag space and are ignored.
Blank lines are filtered by the loader before reaching this module.
"""

from __future__ import annotations

from typing import Iterator
from uuid import UUID

from ..errors import (
    InvalidBlobId,
    InvalidIdentifier,
    InvalidSpanValue,
    MissingPathValue,
    TruncatedFragment,
    UnknownObjectKind,
)
from ..models.links import Fragment, Link, LinkObject, PathObject, is_object_id

FRAGMENT_KIND = "fragment"
PATH_KIND = "path"
SPAN_FIELDS = ("starting_line", "starting_column", "ending_line", "ending_column")


def _parse_span_value(field: str, token: str) -> int:
    # int() accepts "+3" and "1_000"; the record format only allows plain digits.
    if not token.isascii() or not token.isdigit():
        raise InvalidSpanValue(
            f"fragment {field} is not a non-negative integer: {token!r}",
            field=field,
        )
    return int(token)


def parse_object(tokens: Iterator[str]) -> LinkObject:
    """Consume one object from ``tokens``."""
    kind = next(tokens, None)

    if kind == FRAGMENT_KIND:
        values = [token for _, token in zip(range(5), tokens)]
        if len(values) < 5:
            raise TruncatedFragment(
                f"fragment object expects 5 values, got {len(values)}"
            )
        blob_token, *span_tokens = values
        if not is_object_id(blob_token):
            raise InvalidBlobId(f"fragment object has an invalid blob id: {blob_token!r}")
        span = {
            field: _parse_span_value(field, token)
            for field, token in zip(SPAN_FIELDS, span_tokens)
        }
        return Fragment(blob_id=blob_token, **span)

    if kind == PATH_KIND:
        path = next(tokens, None)
        if path is None:
            raise MissingPathValue("path object is not followed by a path value")
        return PathObject(path=path)

    if kind is None:
        raise UnknownObjectKind("expected an object, found end of line")
    raise UnknownObjectKind(f"unknown object kind {kind!r}")


def parse_link(line: str) -> Link:
    """Parse one link record line."""
    tokens = iter([token for token in line.split(" ") if token])
    raw_id = next(tokens, None)
    if raw_id is None:
        raise InvalidIdentifier("empty link line")
    try:
        link_id = UUID(raw_id)
    except ValueError as exc:
        raise InvalidIdentifier(f"link identifier is not a UUID: {raw_id!r}") from exc

    first = parse_object(tokens)
    second = parse_object(tokens)
    return Link(id=link_id, first=first, second=second)


def format_object(obj: LinkObject) -> str:
    if isinstance(obj, Fragment):
        return " ".join(
            [FRAGMENT_KIND, obj.blob_id, *(str(getattr(obj, field)) for field in SPAN_FIELDS)]
        )
    return f"{PATH_KIND} {obj.path}"


def format_link(link: Link) -> str:
    """Render a link in the record format accepted by :func:`parse_link`."""
    return " ".join([str(link.id), format_object(link.first), format_object(link.second)])
