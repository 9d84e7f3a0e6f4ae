"""
Data models for link records.

A Link pairs an opaque UUID with exactly two anchors ("objects"):

- Fragment: a blob id frozen at recording time plus a text span inside
  that blob. The span is carried as recorded and never re-validated.
- PathObject: a repository-relative path that always means "whatever the
  file is now". Paths need no history walk.

A LinkSet is the parsed content of one link record file: the commit the
set was captured against plus its links in file order.

All models are frozen. Links are values owned by their LinkSet.
"""

from __future__ import annotations

import re
from typing import Annotated, Iterator, Literal, Union
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, NonNegativeInt

_OBJECT_ID_PATTERN = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


def is_object_id(value: str) -> bool:
    """Check for a full hex git object id (SHA-1 or SHA-256), any case."""
    return bool(_OBJECT_ID_PATTERN.match(value.lower()))


def _normalize_object_id(value: str) -> str:
    normalized = value.lower()
    if not _OBJECT_ID_PATTERN.match(normalized):
        raise ValueError(f"not a full hex object id: {value!r}")
    return normalized


ObjectId = Annotated[str, AfterValidator(_normalize_object_id)]


class Fragment(BaseModel):
    """Text span inside a specific historical blob."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["fragment"] = "fragment"
    blob_id: ObjectId
    starting_line: NonNegativeInt
    starting_column: NonNegativeInt
    ending_line: NonNegativeInt
    ending_column: NonNegativeInt


class PathObject(BaseModel):
    """Live pointer to a repository-relative path."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["path"] = "path"
    path: str


LinkObject = Annotated[Union[Fragment, PathObject], Field(discriminator="kind")]


class Link(BaseModel):
    """An identifier anchored by two objects."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    first: LinkObject
    second: LinkObject
    # Reserved for future flags; never interpreted.
    flags: int = 0

    @property
    def objects(self) -> tuple[LinkObject, LinkObject]:
        return (self.first, self.second)

    def fragments(self) -> Iterator[tuple[int, Fragment]]:
        """Yield ``(object_index, fragment)`` for each fragment anchor."""
        for index, obj in enumerate(self.objects):
            if isinstance(obj, Fragment):
                yield index, obj


class LinkSet(BaseModel):
    """Links captured against ``previous_commit``."""

    model_config = ConfigDict(frozen=True)

    previous_commit: ObjectId
    links: tuple[Link, ...] = ()

    def fragment_links(self) -> list[Link]:
        return [link for link in self.links if next(link.fragments(), None) is not None]
