"""
Structural blob diff models and the ordered event stream built from them.

The repository capability produces a BlobDiff. The DiffReporter flattens it
into events, in this order per comparison:

    DeltaEvent, [BinaryEvent], (HunkEvent, LineEvent*)*
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DeltaStatus(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNMODIFIED = "unmodified"


class LineOrigin(str, Enum):
    CONTEXT = " "
    ADDITION = "+"
    DELETION = "-"
    # Marker following a line that has no trailing newline.
    NO_NEWLINE = "\\"


class DiffLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    origin: LineOrigin
    content: str
    old_lineno: Optional[int] = None
    new_lineno: Optional[int] = None


class DiffHunk(BaseModel):
    """A contiguous region of change. Line numbers are 1-based, as in git."""

    model_config = ConfigDict(frozen=True)

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: tuple[DiffLine, ...] = ()

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"


class BlobDiff(BaseModel):
    """Comparison of two blobs. Either side is None when absent."""

    model_config = ConfigDict(frozen=True)

    name: str
    old_id: Optional[str] = None
    new_id: Optional[str] = None
    status: DeltaStatus
    binary: bool = False
    hunks: tuple[DiffHunk, ...] = ()


# ============================================================================
# Events
# ============================================================================


class DeltaEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["delta"] = "delta"
    name: str
    old_id: Optional[str] = None
    new_id: Optional[str] = None
    status: DeltaStatus


class BinaryEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["binary"] = "binary"
    name: str


class HunkEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["hunk"] = "hunk"
    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int


class LineEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["line"] = "line"
    origin: LineOrigin
    content: str
    old_lineno: Optional[int] = None
    new_lineno: Optional[int] = None


DiffEvent = Annotated[
    Union[DeltaEvent, BinaryEvent, HunkEvent, LineEvent],
    Field(discriminator="type"),
]
