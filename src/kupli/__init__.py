"""
Public API for kupli.

Links anchor an identifier to a repository path or to a text fragment of a
specific blob. kupli re-resolves fragment anchors as git history advances.
"""

from .config import KupliConfig, load_config
from .errors import (
    AnchorNotOnChain,
    BlobNotFoundAtAnchor,
    CorruptHistory,
    InvalidBlobId,
    InvalidEncoding,
    InvalidHeaderCommit,
    InvalidIdentifier,
    InvalidSpanValue,
    KupliError,
    LinkFormatError,
    MissingHeader,
    MissingPathValue,
    NameVanished,
    RepositoryError,
    ResolutionError,
    StopDiffWalk,
    TruncatedFragment,
    UnknownObjectKind,
)
from .history import CommitChain, DiffReporter, FragmentResolver, build_commit_chain
from .models import (
    Fragment,
    Link,
    LinkFailure,
    LinkSet,
    LinkSetFailure,
    LinkSetSources,
    PathObject,
    ResolutionReport,
    Transition,
)
from .records import format_link_set, parse_link, parse_link_set
from .repository import GitRepository, Repository
from .session import ResolutionSession, resolve

__all__ = [
    "resolve",
    "ResolutionSession",
    "KupliConfig",
    "load_config",
    "GitRepository",
    "Repository",
    "CommitChain",
    "build_commit_chain",
    "FragmentResolver",
    "DiffReporter",
    "parse_link",
    "parse_link_set",
    "format_link_set",
    "Fragment",
    "PathObject",
    "Link",
    "LinkSet",
    "LinkSetSources",
    "LinkFailure",
    "LinkSetFailure",
    "ResolutionReport",
    "Transition",
    "KupliError",
    "LinkFormatError",
    "InvalidIdentifier",
    "TruncatedFragment",
    "InvalidBlobId",
    "InvalidSpanValue",
    "MissingPathValue",
    "UnknownObjectKind",
    "MissingHeader",
    "InvalidHeaderCommit",
    "InvalidEncoding",
    "ResolutionError",
    "AnchorNotOnChain",
    "BlobNotFoundAtAnchor",
    "NameVanished",
    "CorruptHistory",
    "RepositoryError",
    "StopDiffWalk",
]
