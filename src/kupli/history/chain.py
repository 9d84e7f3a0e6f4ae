"""
Commit chain indexer.

Git history points backwards (child -> parent). To walk forward from an old
commit we invert the first-parent path from HEAD to the root once, into an
immutable ``parent -> child`` map.

Only the first parent is followed. Commits reachable solely through other
parents of a merge are not indexed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from ..errors import CorruptHistory
from ..logging import logger
from ..repository.base import Repository


@dataclass(frozen=True)
class CommitChain:
    """First-parent path from HEAD to the root, indexed for forward walks.

    ``commits`` is in walk order (head first, root last). ``successors``
    maps every commit except head to the commit walked immediately before it.
    """

    commits: tuple[str, ...]
    successors: Mapping[str, str] = field(repr=False)

    @property
    def head(self) -> str:
        return self.commits[0]

    @property
    def root(self) -> str:
        return self.commits[-1]

    def successor(self, commit: str) -> Optional[str]:
        return self.successors.get(commit)

    def walk_forward(self, commit: str) -> Iterator[str]:
        """Yield the commits after ``commit``, oldest first, ending at head."""
        current = self.successors.get(commit)
        while current is not None:
            yield current
            current = self.successors.get(current)

    def __contains__(self, commit: object) -> bool:
        return commit == self.head or commit in self.successors


def build_commit_chain(repository: Repository, head: Optional[str] = None) -> CommitChain:
    """Walk first-parent ancestry from ``head`` (default HEAD) to the root."""
    current = head if head is not None else repository.head_commit()
    commits: list[str] = []
    visited: set[str] = set()
    successors: dict[str, str] = {}
    child: Optional[str] = None

    while True:
        if current in visited:
            raise CorruptHistory(current)
        visited.add(current)
        commits.append(current)
        if child is not None:
            successors[current] = child

        info = repository.read_commit(current)
        if info.parent_count == 0:
            break
        child, current = current, info.parent(0)

    logger.debug(f"CommitChain: indexed {len(commits)} commits from {commits[0]} to root {commits[-1]}")
    return CommitChain(commits=tuple(commits), successors=MappingProxyType(successors))
