"""
Public models for fragment resolution results.
"""

from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .diff import DiffEvent
from .links import LinkSet

LinkSource = Literal["head", "workdir"]


class Transition(BaseModel):
    """
    Where a fragment's blob first changed after the anchor commit.

    When the tracked name kept the same blob all the way to head, ``commit``
    is the head and ``new_blob_id == old_blob_id`` (``diverged`` is False).
    """

    model_config = ConfigDict(frozen=True)

    link_id: UUID = Field(description="Identifier of the link the fragment belongs to.")
    object_index: int = Field(description="Position of the fragment inside the link (0 or 1).")
    name: str = Field(description="Repository path tracked during the forward walk.")
    old_blob_id: str = Field(description="Blob id recorded in the link.")
    commit: str = Field(description="First commit where the blob differs, or head.")
    new_blob_id: str = Field(description="Blob id found at ``commit``.")

    @computed_field
    @property
    def diverged(self) -> bool:
        return self.old_blob_id != self.new_blob_id


class LinkFailure(BaseModel):
    """A fragment that could not be resolved."""

    link_id: UUID
    object_index: int
    kind: str = Field(description="Error kind, for example name_vanished.")
    message: str
    commit: Optional[str] = None


class LinkSetFailure(BaseModel):
    """A link set rejected as a whole, either at load time or at its anchor."""

    kind: str = Field(description="Error kind, for example invalid_identifier or anchor_not_on_chain.")
    message: str
    line_number: Optional[int] = Field(default=None, description="Record line of a format error.")
    commit: Optional[str] = Field(default=None, description="Commit involved in a resolution error.")


class TransitionDiff(BaseModel):
    transition: Transition
    events: list[DiffEvent] = Field(default_factory=list)


class ResolutionReport(BaseModel):
    """Outcome of resolving one LinkSet."""

    source: LinkSource
    previous_commit: str
    transitions: list[Transition] = Field(default_factory=list)
    failures: list[LinkFailure] = Field(default_factory=list)
    diffs: list[TransitionDiff] = Field(default_factory=list)
    error: Optional[LinkSetFailure] = Field(
        default=None,
        description="Set when the whole set failed (for example anchor_not_on_chain).",
    )


class LinkSetSources(BaseModel):
    """Link sets loaded from HEAD and from the working copy."""

    head: Optional[LinkSet] = None
    workdir: Optional[LinkSet] = None
    errors: dict[str, LinkSetFailure] = Field(
        default_factory=dict,
        description="Per-source format errors; the other source is still loaded.",
    )

    def items(self) -> list[tuple[LinkSource, LinkSet]]:
        loaded: list[tuple[LinkSource, LinkSet]] = []
        if self.head is not None:
            loaded.append(("head", self.head))
        if self.workdir is not None:
            loaded.append(("workdir", self.workdir))
        return loaded
