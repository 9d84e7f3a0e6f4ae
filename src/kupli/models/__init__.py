from .diff import (
    BinaryEvent,
    BlobDiff,
    DeltaEvent,
    DeltaStatus,
    DiffEvent,
    DiffHunk,
    DiffLine,
    HunkEvent,
    LineEvent,
    LineOrigin,
)
from .links import (
    Fragment,
    Link,
    LinkObject,
    LinkSet,
    PathObject,
    is_object_id,
)
from .resolution import (
    LinkFailure,
    LinkSetFailure,
    LinkSetSources,
    LinkSource,
    ResolutionReport,
    Transition,
    TransitionDiff,
)

__all__ = [
    "BinaryEvent",
    "BlobDiff",
    "DeltaEvent",
    "DeltaStatus",
    "DiffEvent",
    "DiffHunk",
    "DiffLine",
    "HunkEvent",
    "LineEvent",
    "LineOrigin",
    "Fragment",
    "Link",
    "LinkObject",
    "LinkSet",
    "PathObject",
    "is_object_id",
    "LinkFailure",
    "LinkSetFailure",
    "LinkSetSources",
    "LinkSource",
    "ResolutionReport",
    "Transition",
    "TransitionDiff",
]
