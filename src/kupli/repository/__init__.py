"""Repository capability: the protocol the resolver consumes and its git backend."""

from .base import BLOB, COMMIT, TREE, CommitInfo, Repository, TreeEntry
from .blobdiff import build_blob_diff, is_binary_content
from .git import GitRepository

__all__ = [
    "BLOB",
    "COMMIT",
    "TREE",
    "CommitInfo",
    "GitRepository",
    "Repository",
    "TreeEntry",
    "build_blob_diff",
    "is_binary_content",
]
