"""
Error taxonomy for link loading and resolution.

Three families:
- LinkFormatError: the link record text is malformed. A single bad line
  invalidates the whole LinkSet.
- ResolutionError: the records parse, but cannot be followed through history.
- RepositoryError: the underlying git capability failed. Never suppressed.
"""

from __future__ import annotations

from typing import Optional


class KupliError(Exception):
    """Base class for every error raised by this package."""


# ============================================================================
# Format errors (parse time)
# ============================================================================


class LinkFormatError(KupliError, ValueError):
    """A link record document or line could not be parsed."""

    kind = "format_error"

    def __init__(self, message: str, *, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"


class InvalidIdentifier(LinkFormatError):
    kind = "invalid_identifier"


class TruncatedFragment(LinkFormatError):
    kind = "truncated_fragment"


class InvalidBlobId(LinkFormatError):
    kind = "invalid_blob_id"


class InvalidSpanValue(LinkFormatError):
    """A fragment span token is not a non-negative integer."""

    kind = "invalid_span_value"

    def __init__(self, message: str, *, field: str, line_number: Optional[int] = None):
        super().__init__(message, line_number=line_number)
        self.field = field


class MissingPathValue(LinkFormatError):
    kind = "missing_path_value"


class UnknownObjectKind(LinkFormatError):
    kind = "unknown_object_kind"


class MissingHeader(LinkFormatError):
    kind = "missing_header"


class InvalidHeaderCommit(LinkFormatError):
    kind = "invalid_header_commit"


class InvalidEncoding(LinkFormatError):
    kind = "invalid_encoding"


# ============================================================================
# Resolution errors (resolve time)
# ============================================================================


class ResolutionError(KupliError):
    """A parsed link could not be followed through commit history."""

    kind = "resolution_error"


class AnchorNotOnChain(ResolutionError):
    """The link set's anchor commit has no successor on the walked chain."""

    kind = "anchor_not_on_chain"

    def __init__(self, commit: str):
        super().__init__(f"anchor commit {commit} is not followed by any commit on the first-parent chain")
        self.commit = commit


class BlobNotFoundAtAnchor(ResolutionError):
    """No blob with the recorded id exists in the anchor commit's tree."""

    kind = "blob_not_found_at_anchor"

    def __init__(self, blob_id: str, commit: str):
        super().__init__(f"blob {blob_id} not found in tree of anchor commit {commit}")
        self.blob_id = blob_id
        self.commit = commit


class NameVanished(ResolutionError):
    """The tracked name no longer exists in a later commit's tree."""

    kind = "name_vanished"

    def __init__(self, name: str, commit: str):
        super().__init__(f"tracked name '{name}' does not exist at commit {commit}")
        self.name = name
        self.commit = commit


class CorruptHistory(ResolutionError):
    """A commit was reached twice while walking first-parent ancestry."""

    kind = "corrupt_history"

    def __init__(self, commit: str):
        super().__init__(f"commit {commit} visited twice while walking history")
        self.commit = commit


# ============================================================================
# Capability errors
# ============================================================================


class RepositoryError(KupliError):
    """The repository capability failed (missing object, git failure, I/O)."""

    def __init__(self, message: str, *, command: Optional[list[str]] = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class StopDiffWalk(KupliError):
    """Raised by a diff event handler to stop the walk early."""
