"""Protocol for the version-control capability consumed by the resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, runtime_checkable

from ..models.diff import BlobDiff

BLOB = "blob"
TREE = "tree"
COMMIT = "commit"


@dataclass(frozen=True)
class CommitInfo:
    """A commit as read from the object store."""

    id: str
    tree: str
    parents: tuple[str, ...] = ()
    message: str = ""

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    def parent(self, index: int) -> str:
        return self.parents[index]


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a recursively walked tree.

    ``path`` is repository-relative; ``name`` is its last component.
    ``kind`` is ``blob``, ``tree`` or ``commit`` (submodule).
    """

    path: str
    id: str
    kind: str
    mode: str = "100644"

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def is_blob(self) -> bool:
        return self.kind == BLOB


@runtime_checkable
class Repository(Protocol):
    """Read-only repository access.

    Implementations raise ``RepositoryError`` for any failure of the
    underlying store. Lookups that legitimately find nothing return None.
    """

    def head_commit(self) -> str:
        """Return the commit id HEAD peels to."""
        ...

    def read_commit(self, commit_id: str) -> CommitInfo:
        ...

    def iter_tree(self, tree_id: str) -> Iterator[TreeEntry]:
        """Yield every entry below ``tree_id`` in deterministic pre-order."""
        ...

    def find_entry_by_id(self, tree_id: str, object_id: str) -> Optional[TreeEntry]:
        """Return the first blob entry, in pre-order, whose id is ``object_id``."""
        ...

    def find_entry_by_path(self, tree_id: str, path: str) -> Optional[TreeEntry]:
        ...

    def read_blob(self, blob_id: str) -> bytes:
        ...

    def diff_blobs(
        self,
        old_id: Optional[str],
        new_id: Optional[str],
        name: str,
        context_lines: int = 3,
    ) -> BlobDiff:
        """Compare two blobs; None stands for an absent side."""
        ...

    def read_workdir_file(self, path: str) -> Optional[bytes]:
        """Return working-copy content at ``path``, or None if absent or bare."""
        ...
